from __future__ import annotations

import asyncio
import contextlib
import logging
import subprocess
from pathlib import Path

from mcglsl.config import Settings
from mcglsl.errors import UnsupportedStageError, ValidatorLaunchError

logger = logging.getLogger(__name__)

_STAGE_BY_EXTENSION = {
    ".fsh": "frag",
    ".gsh": "geom",
    ".vsh": "vert",
    ".csh": "comp",
}


def stage_for(path: str | Path) -> str:
    suffix = Path(path).suffix.lower()
    if suffix in _STAGE_BY_EXTENSION:
        return _STAGE_BY_EXTENSION[suffix]
    raise UnsupportedStageError(f"No shader stage for extension: {suffix or '(none)'}")


def has_stage(path: str | Path) -> bool:
    return Path(path).suffix.lower() in _STAGE_BY_EXTENSION


def build_command(path: str | Path, settings: Settings) -> list[str]:
    return [settings.glslang_path, "--stdin", "-S", stage_for(path)]


def run_validator(path: str | Path, text: str, settings: Settings) -> str:
    """Feed ``text`` to glslangValidator and return its combined output.

    A non-zero exit status is the normal "has errors" outcome; only a failure to
    start the tool, or a run longer than the configured timeout, is an error.
    """
    command = build_command(path, settings)
    try:
        result = subprocess.run(
            command,
            input=text,
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=settings.validator_timeout,
        )
    except subprocess.TimeoutExpired:
        raise ValidatorLaunchError(
            f"{settings.glslang_path} did not finish within {settings.validator_timeout:g}s"
        ) from None
    except OSError as exc:
        raise ValidatorLaunchError(f"Failed to run {settings.glslang_path}: {exc}") from exc
    logger.debug("%s exited with %d", settings.glslang_path, result.returncode)
    return result.stdout or ""


async def run_validator_async(path: str | Path, text: str, settings: Settings) -> str:
    """Asyncio variant of :func:`run_validator`; the child is killed when cancelled."""
    command = build_command(path, settings)
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as exc:
        raise ValidatorLaunchError(f"Failed to run {settings.glslang_path}: {exc}") from exc

    try:
        stdout, _ = await asyncio.wait_for(
            process.communicate(text.encode("utf-8")),
            timeout=settings.validator_timeout,
        )
    except asyncio.TimeoutError:
        _kill(process)
        await process.wait()
        raise ValidatorLaunchError(
            f"{settings.glslang_path} did not finish within {settings.validator_timeout:g}s"
        ) from None
    except asyncio.CancelledError:
        _kill(process)
        raise
    logger.debug("%s exited with %d", settings.glslang_path, process.returncode)
    return stdout.decode("utf-8", errors="replace")


def _kill(process: asyncio.subprocess.Process) -> None:
    with contextlib.suppress(ProcessLookupError):
        process.kill()
