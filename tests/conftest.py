"""Shared fixtures and helpers for tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from mcglsl.config import Settings
from mcglsl.core.graph import WorkspaceIndex
from tests.helpers import RecordingClient, ShaderPack

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shader pack fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def pack(tmp_path: Path) -> ShaderPack:
    shaderpacks = tmp_path / "shaderpacks"
    shaders = shaderpacks / "pack" / "shaders"
    shaders.mkdir(parents=True)
    return ShaderPack(shaderpacks=shaderpacks, shaders=shaders)


@pytest.fixture
def settings(pack: ShaderPack) -> Settings:
    return Settings(glslang_path="glslangValidator", shaderpacks_path=str(pack.shaderpacks))


@pytest.fixture
def index() -> WorkspaceIndex:
    return WorkspaceIndex()


@pytest.fixture
def client() -> RecordingClient:
    return RecordingClient()
