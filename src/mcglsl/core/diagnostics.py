"""Parse glslangValidator output and map it back onto the original files."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from mcglsl.core.paths import relative_to_shaderpacks
from mcglsl.core.preprocess import PreprocessResult
from mcglsl.core.ranges import line_range
from mcglsl.models import Diagnostic, Range, Severity

logger = logging.getLogger(__name__)

_DIAGNOSTIC_RE = re.compile(r"^(ERROR|WARNING): ([^?<>*|\"]+?):(\d+): (?:'.*?' : )?(.+?)\r?$")

_NOISE = (
    re.compile(r"stdin"),
    re.compile(r"No code generated"),
    re.compile(r"compilation terminated"),
    re.compile(r"Could not process include directive for header name:"),
)

_SEVERITIES = {"ERROR": Severity.ERROR, "WARNING": Severity.WARNING}

# glslang grammar token names, in replacement order
_TOKENS = (
    ("SEMICOLON", ";"),
    ("COMMA", ","),
    ("COLON", ":"),
    ("EQUAL", "="),
    ("LEFT_PAREN", "("),
    ("RIGHT_PAREN", ")"),
    ("DOT", "."),
    ("BANG", "!"),
    ("DASH", "-"),
    ("TILDE", "~"),
    ("PLUS", "+"),
    ("STAR", "*"),
    ("SLASH", "/"),
    ("PERCENT", "%"),
    ("LEFT_ANGLE", "<"),
    ("RIGHT_ANGLE", ">"),
    ("VERTICAL_BAR", "|"),
    ("CARET", "^"),
    ("AMPERSAND", "&"),
    ("QUESTION", "?"),
    ("LEFT_BRACKET", "["),
    ("RIGHT_BRACKET", "]"),
    ("LEFT_BRACE", "{"),
    ("RIGHT_BRACE", "}"),
)
_TOKEN_PATTERNS = tuple((re.compile(rf"\b{name}\b"), symbol) for name, symbol in _TOKENS)


@dataclass(frozen=True)
class RawDiagnostic:
    severity: Severity
    file: str
    line: int
    message: str


def replace_tokens(message: str) -> str:
    """Replace the first occurrence of each glslang token name with its symbol."""
    for pattern, symbol in _TOKEN_PATTERNS:
        message = pattern.sub(lambda _m, s=symbol: s, message, count=1)
    return message


def _is_noise(line: str) -> bool:
    return any(pattern.search(line) for pattern in _NOISE)


def parse_validator_output(output: str) -> list[RawDiagnostic]:
    entries: list[RawDiagnostic] = []
    for line in output.split("\n"):
        if len(line.strip()) <= 1 or _is_noise(line):
            continue
        match = _DIAGNOSTIC_RE.match(line)
        if match is None:
            continue
        severity, file, line_no, message = match.groups()
        entries.append(
            RawDiagnostic(severity=_SEVERITIES[severity], file=file, line=int(line_no), message=message.strip())
        )
    return entries


class DiagnosticMapper:
    """Turn validator diagnostics into per-file diagnostic lists for one pass."""

    def __init__(self, result: PreprocessResult, shaderpacks_path: str | Path) -> None:
        self.result = result
        self.shaderpacks_path = shaderpacks_path

    def map(self, entries: Iterable[RawDiagnostic], previous_files: Iterable[str] = ()) -> dict[str, list[Diagnostic]]:
        mapped: dict[str, list[Diagnostic]] = {}
        for path in [*self.result.touched_files(), *previous_files]:
            mapped.setdefault(path, [])
        for path, diagnostics in self.result.diagnostics.items():
            mapped.setdefault(path, []).extend(diagnostics)

        for entry in entries:
            file, line = self._locate(entry)
            message = replace_tokens(entry.message)
            mapped.setdefault(file, []).append(self._at(file, line, entry.severity, message))
            if file != self.result.root:
                self._walk_includers(mapped, file, line, entry.severity, message)
        return mapped

    def _locate(self, entry: RawDiagnostic) -> tuple[str, int]:
        line = entry.line - 1
        if entry.file.isdigit():
            # source-string number: the root document before any #line marker
            injected_at = self.result.injected_at
            if injected_at is not None and line > injected_at:
                line -= 1
            return self.result.root, line
        if entry.file != self.result.root and entry.file not in self.result.table:
            logger.warning("Validator reported unknown file %s", entry.file)
        return entry.file, line

    def _at(self, file: str, line: int, severity: Severity, message: str) -> Diagnostic:
        span = line_range(self.result.sources.get(file, []), line)
        if span is None:
            relative = relative_to_shaderpacks(file, self.shaderpacks_path)
            logger.warning("Line %d is out of range for %s", line + 1, relative)
            return Diagnostic(
                severity=severity,
                range=Range.on_line(0, 0, 0),
                message=f"Internal error: line {line + 1} is out of range for {relative}: {message}",
            )
        return Diagnostic(severity=severity, range=span, message=message)

    def _walk_includers(
        self,
        mapped: dict[str, list[Diagnostic]],
        file: str,
        line: int,
        severity: Severity,
        message: str,
    ) -> None:
        """Add a diagnostic at every site that includes ``file``, up to the root."""
        relative = relative_to_shaderpacks(file, self.shaderpacks_path)
        annotated = f"{relative} line {line + 1}: {message}"
        seen_sites: set[tuple[str, int]] = set()
        visited = {file}
        pending = [file]
        while pending:
            current = pending.pop()
            for record in self.result.table.occurrences(current):
                site = (record.parent, record.line_in_file)
                if site in seen_sites:
                    continue
                seen_sites.add(site)
                mapped.setdefault(record.parent, []).append(
                    self._at(record.parent, record.line_in_file, severity, annotated)
                )
                if record.parent != self.result.root and record.parent not in visited:
                    visited.add(record.parent)
                    pending.append(record.parent)


def map_diagnostics(
    output: str,
    result: PreprocessResult,
    shaderpacks_path: str | Path,
    previous_files: Iterable[str] = (),
) -> dict[str, list[Diagnostic]]:
    return DiagnosticMapper(result, shaderpacks_path).map(parse_validator_output(output), previous_files)
