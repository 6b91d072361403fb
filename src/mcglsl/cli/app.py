import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from mcglsl.cli.graph import graph, links
from mcglsl.cli.lint import lint, merge
from mcglsl.cli.serve import serve_app
from mcglsl.cli.watch import watch

app = typer.Typer(
    name="mcglsl",
    help="Expand shader pack includes, run glslangValidator and map its diagnostics back to the original files.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("lint")(lint)
app.command("merge")(merge)
app.command("graph")(graph)
app.command("links")(links)
app.command("watch")(watch)
app.add_typer(serve_app, name="serve")


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main() -> None:
    app()
