"""Test doubles shared across unit and integration tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mcglsl.models import Diagnostic


@dataclass
class ShaderPack:
    """A throwaway ``shaderpacks/<pack>/shaders`` tree."""

    shaderpacks: Path
    shaders: Path

    def write(self, relative: str, text: str) -> Path:
        path = self.shaders / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path


@dataclass
class RecordingClient:
    published: list[tuple[str, list[Diagnostic], int | None]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def publish_diagnostics(self, uri: str, diagnostics: list[Diagnostic], version: int | None = None) -> None:
        self.published.append((uri, diagnostics, version))

    def show_error(self, message: str) -> None:
        self.errors.append(message)
