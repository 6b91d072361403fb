import asyncio
import contextlib
from pathlib import Path
from typing import Annotated

import typer

from mcglsl.cli.console import ConsoleClient, console, get_settings
from mcglsl.cli.lint import GlslangOption, ShaderpacksOption
from mcglsl.session import LintSession
from mcglsl.watcher.watchfiles_adapter import WatchfilesWatcher


def watch(
    root: Annotated[Path, typer.Argument(help="Directory to watch.", exists=True, file_okay=False)] = Path("."),
    glslang: GlslangOption = None,
    shaderpacks: ShaderpacksOption = None,
) -> None:
    """Relint shader programs whenever a file under ROOT changes."""
    settings = get_settings(glslang, shaderpacks)
    if not settings.shaderpacks_path:
        settings = settings.with_overrides(shaderpacks_path=str(root.resolve()))

    session = LintSession(settings, ConsoleClient(settings))
    session.index.scan(root.resolve(), settings.shaderpacks_path)

    async def _run() -> None:
        watcher = WatchfilesWatcher(root.resolve(), session.files_changed)
        await watcher.start()
        console.print(f"[green]Watching {root.resolve()}[/green] (Ctrl+C to stop)")
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()
            await session.close()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())
