"""Include expansion.

The root document is expanded in rounds. Each round finds the includes still
visible in the buffer and splices their files in, bracketed by ``#line``
markers naming the included file and the line to resume at in its parent.
The markers let the next round, and the validator, attribute every line to
its original file. A round that changes nothing ends the expansion.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from mcglsl.core.directives import (
    INCLUDE_EXTENSION,
    FoundInclude,
    entering_marker,
    find_includes,
    find_version_line,
    has_include_extension,
    returning_marker,
)
from mcglsl.core.graph import WorkspaceIndex
from mcglsl.core.paths import relative_to_shaderpacks, resolve_include
from mcglsl.core.ranges import line_range, split_lines
from mcglsl.errors import ConfigurationError
from mcglsl.models import Diagnostic, IncludeRecord, Range, Severity

logger = logging.getLogger(__name__)


class IncludeTable:
    """Include records of one pass, keyed by resolved path in encounter order."""

    def __init__(self) -> None:
        self._records: dict[str, list[IncludeRecord]] = {}

    def add(self, record: IncludeRecord) -> None:
        self._records.setdefault(record.path, []).append(record)

    def latest(self, path: str) -> IncludeRecord | None:
        records = self._records.get(path)
        return records[-1] if records else None

    def occurrences(self, path: str) -> list[IncludeRecord]:
        return list(self._records.get(path, ()))

    def paths(self) -> list[str]:
        return list(self._records)

    def records(self) -> list[IncludeRecord]:
        return [record for records in self._records.values() for record in records]

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __len__(self) -> int:
        return len(self._records)


@dataclass
class PreprocessResult:
    root: str
    lines: list[str]
    table: IncludeTable
    sources: dict[str, list[str]]
    diagnostics: dict[str, list[Diagnostic]]
    injected_at: int | None = None
    config_errors: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def touched_files(self) -> list[str]:
        return [self.root, *self.table.paths()]


class Preprocessor:
    def __init__(
        self,
        root: str | Path,
        text: str,
        shaderpacks_path: str | Path,
        index: WorkspaceIndex,
        overlay: Mapping[str, str] | None = None,
    ) -> None:
        self.root = str(root)
        self.shaderpacks_path = shaderpacks_path
        self.index = index
        # unsaved editor texts, preferred over the files on disk
        self.overlay = overlay or {}
        self.sources: dict[str, list[str]] = {self.root: split_lines(text)}
        self.lines = list(self.sources[self.root])
        self.table = IncludeTable()
        self.diagnostics: dict[str, list[Diagnostic]] = {}
        self.injected_at: int | None = None
        self.config_errors: list[str] = []

    def run(self) -> PreprocessResult:
        self.ensure_include_extension()
        rounds = 0
        while self.expand_round():
            rounds += 1
        logger.debug("Expanded %s in %d round(s), %d include(s)", self.root, rounds, len(self.table))
        return PreprocessResult(
            root=self.root,
            lines=self.lines,
            table=self.table,
            sources=self.sources,
            diagnostics=self.diagnostics,
            injected_at=self.injected_at,
            config_errors=self.config_errors,
        )

    def ensure_include_extension(self) -> None:
        if has_include_extension(self.lines):
            return
        version = find_version_line(self.lines)
        at = 0 if version is None else version + 1
        self.lines.insert(at, INCLUDE_EXTENSION)
        self.injected_at = at

    def expand_round(self) -> int:
        """Splice every include currently visible; return how many lines changed."""
        changes = 0
        spliced: list[IncludeRecord] = []
        # bottom-up so splicing never moves a line we have yet to visit
        for found in reversed(find_includes(self.root, self.lines)):
            line_in_file = self._line_in_file(found)
            try:
                target = resolve_include(found.parent, found.literal, self.shaderpacks_path)
            except ConfigurationError as exc:
                self._configuration_error(str(exc))
                continue

            path = str(target)
            relative = relative_to_shaderpacks(path, self.shaderpacks_path)
            if path in found.ancestors:
                self._diagnose(found.parent, line_in_file, f"{relative} is included recursively.")
                self.lines[found.line_in_buffer] = ""
                changes += 1
                continue

            source = self._load(path)
            if source is None:
                self._diagnose(found.parent, line_in_file, f"{relative} is missing.")
                self.lines[found.line_in_buffer] = ""
                changes += 1
                continue

            self.lines[found.line_in_buffer : found.line_in_buffer + 1] = [
                entering_marker(path),
                *source,
                returning_marker(found.parent, line_in_file),
            ]
            spliced.append(
                IncludeRecord(
                    path=path,
                    line_in_buffer=found.line_in_buffer,
                    line_in_file=line_in_file,
                    parent=found.parent,
                    raw=found.raw,
                )
            )
            self.index.add_include(path, found.parent)
            changes += 1

        for record in reversed(spliced):
            self.table.add(record)
        return changes

    def _line_in_file(self, found: FoundInclude) -> int:
        # the root buffer carries one extra line once the extension is injected
        if found.parent == self.root and self.injected_at is not None and found.line_in_file > self.injected_at:
            return found.line_in_file - 1
        return found.line_in_file

    def _load(self, path: str) -> list[str] | None:
        if path in self.sources:
            return self.sources[path]
        if path in self.overlay:
            lines = split_lines(self.overlay[path])
            self.sources[path] = lines
            return lines
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.info("Cannot read include %s: %s", path, exc)
            return None
        lines = split_lines(text)
        self.sources[path] = lines
        return lines

    def _diagnose(self, file: str, line: int, message: str) -> None:
        span = line_range(self.sources.get(file, []), line) or Range.on_line(line, 0, 0)
        self.diagnostics.setdefault(file, []).append(Diagnostic(severity=Severity.ERROR, range=span, message=message))

    def _configuration_error(self, message: str) -> None:
        if message not in self.config_errors:
            logger.warning("%s", message)
            self.config_errors.append(message)


def preprocess(
    root: str | Path,
    text: str,
    shaderpacks_path: str | Path,
    index: WorkspaceIndex,
    overlay: Mapping[str, str] | None = None,
) -> PreprocessResult:
    return Preprocessor(root, text, shaderpacks_path, index, overlay).run()
