"""Fixtures that stand in for glslangValidator with small shell scripts."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

if sys.platform == "win32":
    collect_ignore_glob = ["*_test.py"]


@pytest.fixture
def fake_glslang(tmp_path: Path) -> Callable[[str], Path]:
    """Return a factory writing an executable script that records its stdin and arguments."""

    def make(body: str) -> Path:
        script = tmp_path / "bin" / "glslangValidator"
        script.parent.mkdir(exist_ok=True)
        script.write_text(
            "#!/bin/sh\n"
            'cat > "$(dirname "$0")/stdin.glsl"\n'
            'echo "$@" > "$(dirname "$0")/args.txt"\n' + body,
            encoding="utf-8",
        )
        script.chmod(0o755)
        return script

    return make
