from pathlib import Path
from typing import Annotated

import typer

from mcglsl.cli.console import ConsoleClient, console, get_settings, render_result
from mcglsl.core.graph import WorkspaceIndex
from mcglsl.core.lint import lint_document, merge_document
from mcglsl.errors import ValidatorLaunchError
from mcglsl.models import Severity

GlslangOption = Annotated[str | None, typer.Option("--glslang", help="Path to glslangValidator.")]
ShaderpacksOption = Annotated[Path | None, typer.Option("--shaderpacks", help="Shaderpacks root directory.")]


def lint(
    path: Annotated[Path, typer.Argument(help="Shader file to lint.", exists=True, dir_okay=False)],
    glslang: GlslangOption = None,
    shaderpacks: ShaderpacksOption = None,
) -> None:
    """Expand includes, run the validator and print remapped diagnostics."""
    settings = get_settings(glslang, shaderpacks)
    client = ConsoleClient(settings)
    file_path = path.resolve()
    text = file_path.read_text(encoding="utf-8", errors="replace")

    try:
        result = lint_document(file_path, text, settings, WorkspaceIndex(), client)
    except ValidatorLaunchError:
        raise typer.Exit(2) from None

    render_result(result, settings)
    if any(d.severity == Severity.ERROR for entries in result.diagnostics.values() for d in entries):
        raise typer.Exit(1)


def merge(
    path: Annotated[Path, typer.Argument(help="Shader file to expand.", exists=True, dir_okay=False)],
    shaderpacks: ShaderpacksOption = None,
) -> None:
    """Print the shader with every include expanded, as the validator sees it."""
    settings = get_settings(None, shaderpacks)
    client = ConsoleClient(settings)
    file_path = path.resolve()
    text = file_path.read_text(encoding="utf-8", errors="replace")
    result = merge_document(file_path, text, settings, WorkspaceIndex())
    for message in result.config_errors:
        client.show_error(message)
    console.print(result.text, markup=False, highlight=False, soft_wrap=True)
