from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mcglsl.config import Settings, load_settings
from mcglsl.core.paths import relative_to_shaderpacks
from mcglsl.models import Diagnostic, LintResult, Severity

console = Console()

_SEVERITY_STYLE = {Severity.ERROR: "red", Severity.WARNING: "yellow"}


def get_settings(glslang: str | None, shaderpacks: Path | None) -> Settings:
    return load_settings().with_overrides(
        glslang_path=glslang,
        shaderpacks_path=str(shaderpacks.resolve()) if shaderpacks else None,
    )


class ConsoleClient:
    """Print published diagnostics and notifications to the terminal."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.errors: list[str] = []

    def publish_diagnostics(self, uri: str, diagnostics: list[Diagnostic], version: int | None = None) -> None:
        path = unquote(urlparse(uri).path)
        if not diagnostics:
            console.print(f"[green]clean[/green] {escape(self._display(path))}")
            return
        render_diagnostics({path: diagnostics}, self.settings)

    def show_error(self, message: str) -> None:
        self.errors.append(message)
        console.print(message, style="red", markup=False, highlight=False)

    def _display(self, path: str) -> str:
        return relative_to_shaderpacks(path, self.settings.shaderpacks_path)


def render_diagnostics(diagnostics: dict[str, list[Diagnostic]], settings: Settings) -> int:
    table = Table(show_lines=False)
    for header in ("file", "line", "severity", "message"):
        table.add_column(header)
    rows = 0
    for path, entries in diagnostics.items():
        display = relative_to_shaderpacks(path, settings.shaderpacks_path)
        for diagnostic in entries:
            style = _SEVERITY_STYLE.get(diagnostic.severity, "")
            table.add_row(
                escape(display),
                str(diagnostic.range.start.line + 1),
                f"[{style}]{diagnostic.severity.name.lower()}[/{style}]",
                escape(diagnostic.message),
            )
            rows += 1
    if rows:
        console.print(table)
    return rows


def render_result(result: LintResult, settings: Settings) -> None:
    rows = render_diagnostics(result.diagnostics, settings)
    if not result.validated:
        console.print("[yellow]Validator not run (no shader stage for this file).[/yellow]")
    console.print(f"({rows} diagnostics in {len(result.diagnostics)} files)")
