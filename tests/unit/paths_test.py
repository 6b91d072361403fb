"""Tests for include path resolution."""

from pathlib import Path

import pytest

from mcglsl.core.paths import relative_to_shaderpacks, resolve_include
from mcglsl.errors import ConfigurationError

ROOT = Path("/home/user/shaderpacks")


def test_relative_include_uses_including_directory() -> None:
    including = ROOT / "pack" / "shaders" / "world0" / "gbuffers.fsh"
    assert resolve_include(including, "lib/common.glsl", ROOT) == ROOT / "pack/shaders/world0/lib/common.glsl"


def test_relative_include_is_normalized() -> None:
    including = ROOT / "pack" / "shaders" / "world0" / "gbuffers.fsh"
    assert resolve_include(including, "../lib/common.glsl", ROOT) == ROOT / "pack/shaders/lib/common.glsl"


def test_absolute_include_is_rooted_at_pack_shaders_dir() -> None:
    including = ROOT / "pack" / "shaders" / "world-1" / "program" / "final.fsh"
    assert resolve_include(including, "/lib/settings.glsl", ROOT) == ROOT / "pack/shaders/lib/settings.glsl"


def test_unset_shaderpacks_path_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        resolve_include(ROOT / "pack" / "shaders" / "final.fsh", "a.glsl", "")


def test_file_outside_shaderpacks_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="Shaderpacks path may not be correct"):
        resolve_include(Path("/elsewhere/final.fsh"), "a.glsl", ROOT)


def test_relative_to_shaderpacks() -> None:
    assert relative_to_shaderpacks(ROOT / "pack" / "shaders" / "a.glsl", ROOT) == "pack/shaders/a.glsl"
    assert relative_to_shaderpacks("/elsewhere/a.glsl", ROOT) == "/elsewhere/a.glsl"
    assert relative_to_shaderpacks("/elsewhere/a.glsl", "") == "/elsewhere/a.glsl"
