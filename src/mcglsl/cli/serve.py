import typer
from rich.console import Console

from mcglsl.cli.console import get_settings
from mcglsl.cli.lint import GlslangOption, ShaderpacksOption

serve_app = typer.Typer(help="Start servers.")
console = Console(stderr=True)


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
    glslang: GlslangOption = None,
    shaderpacks: ShaderpacksOption = None,
) -> None:
    """Start the MCP server."""
    from mcglsl.mcp.server import create_mcp_server

    server = create_mcp_server(get_settings(glslang, shaderpacks))
    console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
