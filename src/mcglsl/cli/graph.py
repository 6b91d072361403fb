from pathlib import Path
from typing import Annotated

import typer

from mcglsl.cli.console import console, get_settings
from mcglsl.cli.lint import ShaderpacksOption
from mcglsl.core.graph import WorkspaceIndex
from mcglsl.core.paths import relative_to_shaderpacks


def graph(
    root: Annotated[Path, typer.Argument(help="Directory to index.", exists=True, file_okay=False)] = Path("."),
    shaderpacks: ShaderpacksOption = None,
    roots_of: Annotated[
        Path | None,
        typer.Option("--roots-of", help="List the top-level files that include this file."),
    ] = None,
) -> None:
    """Index a shader pack and print its include graph in DOT format."""
    settings = get_settings(None, shaderpacks)
    if not settings.shaderpacks_path:
        settings = settings.with_overrides(shaderpacks_path=str(root.resolve()))

    index = WorkspaceIndex()
    index.scan(root.resolve(), settings.shaderpacks_path)

    if roots_of is not None:
        for ancestor in index.root_ancestors(str(roots_of.resolve())):
            console.print(ancestor, markup=False, highlight=False, soft_wrap=True)
        return
    console.print(index.to_dot(), markup=False, highlight=False, soft_wrap=True, end="")


def links(
    path: Annotated[Path, typer.Argument(help="Shader file whose includes to list.", exists=True, dir_okay=False)],
    shaderpacks: ShaderpacksOption = None,
) -> None:
    """Print each include of PATH as LINE:START-END and the file it resolves to (1-based, inclusive)."""
    settings = get_settings(None, shaderpacks)
    file_path = path.resolve()
    index = WorkspaceIndex()
    index.add_file(file_path, settings.shaderpacks_path)
    for link in index.links(str(file_path)):
        span = f"{link.range.start.line + 1}:{link.range.start.character + 1}-{link.range.end.character}"
        target = relative_to_shaderpacks(link.target, settings.shaderpacks_path)
        console.print(f"{span} {target}", markup=False, highlight=False, soft_wrap=True)
