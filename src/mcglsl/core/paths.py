import os
from pathlib import Path

from mcglsl.errors import ConfigurationError

# "/foo.glsl" is rooted at <shaderpacks>/<pack>/<shaders dir>, not at the filesystem root
_PACK_ROOT_DEPTH = 2


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(path))


def resolve_include(including: str | Path, literal: str, shaderpacks_path: str | Path) -> Path:
    """Resolve an include literal relative to the file containing it."""
    if not str(shaderpacks_path):
        raise ConfigurationError(
            f"Shaderpacks path is not set; cannot resolve includes of '{including}'."
        )
    root = _normalize(Path(shaderpacks_path))
    current = _normalize(Path(including))
    try:
        rel = current.relative_to(root)
    except ValueError:
        raise ConfigurationError(
            f"Shaderpacks path may not be correct. Current file is in '{current}' but the path is set to '{root}'."
        ) from None

    if literal.startswith("/"):
        pack_root = root.joinpath(*rel.parts[:_PACK_ROOT_DEPTH])
        return _normalize(pack_root / literal.lstrip("/"))
    return _normalize(current.parent / literal)


def relative_to_shaderpacks(path: str | Path, shaderpacks_path: str | Path) -> str:
    """Return ``path`` relative to the shaderpacks root when possible, for messages."""
    if not str(shaderpacks_path):
        return str(path)
    try:
        return Path(path).relative_to(Path(shaderpacks_path)).as_posix()
    except ValueError:
        return str(path)
