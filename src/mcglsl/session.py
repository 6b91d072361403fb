from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path

from mcglsl.config import Settings
from mcglsl.core.graph import WorkspaceIndex
from mcglsl.core.lint import finish_pass, merge_document, publish, report_configuration_errors
from mcglsl.core.ports.client import DiagnosticsClient
from mcglsl.core.validator import has_stage, run_validator_async
from mcglsl.errors import ValidatorLaunchError
from mcglsl.models import LintResult

logger = logging.getLogger(__name__)


class LintSession:
    """Schedule lint passes per root document and publish only the newest results.

    A change to a shader program lints that program; a change to an include
    lints every program that includes it. Passes are keyed by the program they
    lint, so any change scheduling a program cancels the pass still pending for
    it, whichever document triggered either one. A pass that finishes after a
    newer pass of its program was scheduled drops its results.

    Texts of changed documents are kept and used in place of the files on disk,
    for the document itself and wherever it is included.
    """

    def __init__(
        self,
        settings: Settings,
        client: DiagnosticsClient,
        index: WorkspaceIndex | None = None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.index = index if index is not None else WorkspaceIndex()
        self._versions: dict[str, int] = {}
        self._texts: dict[str, str] = {}
        self._generations: dict[str, int] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def latest_version(self, path: str | Path) -> int | None:
        return self._versions.get(str(path))

    async def document_changed(self, path: str | Path, text: str, version: int) -> None:
        key = str(path)
        self._versions[key] = version
        self._texts[key] = text
        self.index.add_text(key, text, self.settings.shaderpacks_path)
        for root, root_text in self._targets(key, text):
            self._schedule(root, root_text, version if root == key else None)

    async def files_changed(self, paths: set[Path]) -> None:
        """Re-read files changed on disk and relint them (or the roots including them)."""
        for path in sorted(paths):
            if not path.is_file():
                continue
            key = str(path)
            text = path.read_text(encoding="utf-8", errors="replace")
            await self.document_changed(key, text, self._versions.get(key, 0) + 1)

    async def wait(self) -> None:
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def close(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _schedule(self, root: str, text: str, version: int | None) -> None:
        generation = self._generations.get(root, 0) + 1
        self._generations[root] = generation
        pending = self._tasks.pop(root, None)
        if pending is not None:
            pending.cancel()
        self._tasks[root] = asyncio.create_task(self._run(root, text, generation, version))

    async def _run(self, root: str, text: str, generation: int, version: int | None) -> None:
        try:
            result = await self.lint(root, text)
            if self._generations.get(root) != generation:
                logger.info("Dropping superseded results for %s (pass %d)", root, generation)
                return
            publish(result, self.client, version)
        except ValidatorLaunchError:
            # already shown to the user; previous diagnostics stay in place
            return
        except Exception:
            logger.exception("Lint pass failed for %s", root)
        finally:
            if self._tasks.get(root) is asyncio.current_task():
                del self._tasks[root]

    async def lint(self, root: str, text: str) -> LintResult:
        result = merge_document(root, text, self.settings, self.index, overlay=self._texts)
        report_configuration_errors(result, self.client)
        output: str | None = None
        if has_stage(root):
            try:
                output = await run_validator_async(root, result.text, self.settings)
            except ValidatorLaunchError as exc:
                logger.error("%s", exc)
                self.client.show_error(str(exc))
                raise
        return finish_pass(result, output, self.settings, self.index)

    def _targets(self, path: str, text: str) -> list[tuple[str, str]]:
        if has_stage(path):
            return [(path, text)]
        roots = self.index.root_ancestors(path)
        if not roots:
            return [(path, text)]
        targets: list[tuple[str, str]] = []
        for root in roots:
            root_text = self._texts.get(root)
            if root_text is None:
                try:
                    root_text = Path(root).read_text(encoding="utf-8", errors="replace")
                except OSError:
                    logger.warning("Cannot read root %s of %s", root, path)
                    continue
            targets.append((root, root_text))
        return targets
