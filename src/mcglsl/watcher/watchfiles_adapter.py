from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from watchfiles import Change, DefaultFilter, awatch

from mcglsl.core.graph import SHADER_EXTENSIONS

logger = logging.getLogger(__name__)

OnShadersChanged = Callable[[set[Path]], Coroutine[Any, Any, None]]


def _is_shader_file(path: Path) -> bool:
    return path.suffix in SHADER_EXTENSIONS


class ShaderFilter(DefaultFilter):
    """watchfiles filter passing shader sources outside the usual ignored directories."""

    def __call__(self, change: Change, path: str) -> bool:
        return _is_shader_file(Path(path)) and super().__call__(change, path)


class WatchfilesWatcher:
    """Report shader files added or modified under a shader pack directory.

    Filtering happens inside watchfiles through :class:`ShaderFilter`. Each
    debounced batch is split into written and deleted files; only written files
    reach ``on_change`` (usually ``LintSession.files_changed``), since a deleted
    include surfaces as a missing-include diagnostic the next time a program
    including it is linted.
    """

    def __init__(self, directory: str | Path, on_change: OnShadersChanged, debounce_ms: int = 200) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._debounce_ms = debounce_ms
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watching shaders under %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Stopped watching %s", self._directory)

    async def _watch(self) -> None:
        batches = awatch(self._directory, watch_filter=ShaderFilter(), debounce=self._debounce_ms)
        async for changes in batches:
            written, deleted = split_changes(changes)
            if deleted:
                logger.info("%d shader file(s) deleted", len(deleted))
            if not written:
                continue
            logger.info("%d shader file(s) changed", len(written))
            try:
                await self._on_change(written)
            except Exception:
                logger.exception("Relinting changed shaders failed")


def split_changes(changes: set[tuple[Change, str]]) -> tuple[set[Path], set[Path]]:
    """Split a watchfiles batch into (written, deleted) shader paths."""
    written: set[Path] = set()
    deleted: set[Path] = set()
    for change, raw in changes:
        path = Path(raw)
        if not _is_shader_file(path):
            continue
        if change == Change.deleted:
            deleted.add(path)
        else:
            written.add(path)
    # a file deleted and recreated within one batch still exists
    return written, deleted - written
