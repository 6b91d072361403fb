"""FastMCP server exposing the mc-glsl lint pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from mcglsl.config import Settings
from mcglsl.core.graph import WorkspaceIndex
from mcglsl.core.lint import lint_document, merge_document


def _read(path: str) -> tuple[Path, str]:
    file_path = Path(path).resolve()
    return file_path, file_path.read_text(encoding="utf-8", errors="replace")


def create_mcp_server(settings: Settings, index: WorkspaceIndex | None = None) -> FastMCP:
    """Create a FastMCP server linting with the given settings."""

    workspace = index if index is not None else WorkspaceIndex()
    mcp = FastMCP("mc-glsl", instructions="Validate Minecraft shader pack GLSL files with include support.")

    @mcp.tool()
    async def lint(path: str) -> dict[str, list[dict[str, Any]]]:
        """Lint a shader file and return diagnostics keyed by file path."""
        file_path, text = _read(path)
        result = lint_document(file_path, text, settings, workspace)
        return {
            file: [diagnostic.model_dump(mode="json") for diagnostic in diagnostics]
            for file, diagnostics in result.diagnostics.items()
        }

    @mcp.tool()
    async def merge(path: str) -> str:
        """Return the shader with every include expanded."""
        file_path, text = _read(path)
        return merge_document(file_path, text, settings, workspace).text

    @mcp.tool()
    async def includers(path: str) -> list[str]:
        """List the top-level shader files known to include a file."""
        return workspace.root_ancestors(str(Path(path).resolve()))

    @mcp.tool()
    async def links(path: str) -> list[dict[str, Any]]:
        """List the includes of a file with the span of each path literal and its resolved target."""
        file_path = Path(path).resolve()
        workspace.add_file(file_path, settings.shaderpacks_path)
        return [link.model_dump(mode="json") for link in workspace.links(str(file_path))]

    @mcp.tool()
    async def scan(root: str) -> str:
        """Index every shader file under a directory."""
        directory = Path(root).resolve()
        count = workspace.scan(directory, settings.shaderpacks_path or directory)
        return f"Indexed {count} shader file(s)"

    return mcp
