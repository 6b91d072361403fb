import re
from dataclasses import dataclass

from mcglsl.core.comment import scan_line

INCLUDE_EXTENSION = "#extension GL_GOOGLE_include_directive : require"

_VERSION_RE = re.compile(r"^\s*#version\s+\d{3}\b")
_INCLUDE_RE = re.compile(r'^\s*#include\s+"([^?<>:*|"]+\.[A-Za-z]+)"')
_INCLUDE_EXTENSION_RE = re.compile(r"#extension\s+GL_GOOGLE_include_directive\s*:\s*require")
_MARKER_RE = re.compile(r'^#line (\d+) "(.*)"\s*$')


@dataclass(frozen=True)
class FoundInclude:
    literal: str
    line_in_buffer: int
    line_in_file: int
    parent: str
    # files currently being expanded around this line, root first
    ancestors: tuple[str, ...]
    raw: str
    # columns of the path literal, quotes excluded
    start: int
    end: int


def entering_marker(path: str) -> str:
    return f'#line 0 "{path}"'


def returning_marker(parent: str, include_line: int) -> str:
    # glslang reports the line after "#line N" as N + 1, so the line that follows
    # the include (zero-based include_line + 1) must be announced as include_line + 1
    return f'#line {include_line + 1} "{parent}"'


def parse_marker(line: str) -> tuple[int, str] | None:
    match = _MARKER_RE.match(line)
    if match is None:
        return None
    return int(match.group(1)), match.group(2)


def find_version_line(lines: list[str]) -> int | None:
    in_block = False
    for index, line in enumerate(lines):
        in_block, text = scan_line(in_block, line)
        if _VERSION_RE.match(text):
            return index
    return None


def has_include_extension(lines: list[str]) -> bool:
    in_block = False
    for line in lines:
        in_block, text = scan_line(in_block, line)
        if _INCLUDE_EXTENSION_RE.search(text):
            return True
    return False


def find_includes(root: str, lines: list[str]) -> list[FoundInclude]:
    """Find every ``#include`` still present in ``lines``.

    Marker lines left by earlier expansion rounds are used to track which
    original file each line belongs to, so ``line_in_file`` counts lines of the
    nearest enclosing file rather than of the flattened buffer. A fully expanded
    buffer yields an empty list.
    """
    counters = [-1]
    stack = [root]
    found: list[FoundInclude] = []
    in_block = False

    for index, line in enumerate(lines):
        counters[-1] += 1

        marker = parse_marker(line)
        if marker is not None:
            _, path = marker
            if len(stack) > 1 and path == stack[-2]:
                counters.pop()
                stack.pop()
            else:
                counters.append(-1)
                stack.append(path)
            # comments never span file boundaries
            in_block = False
            continue

        in_block, text = scan_line(in_block, line)
        match = _INCLUDE_RE.match(text)
        if match is None:
            continue
        found.append(
            FoundInclude(
                literal=match.group(1),
                line_in_buffer=index,
                line_in_file=counters[-1],
                parent=stack[-1],
                ancestors=tuple(stack),
                raw=line.strip(),
                start=match.start(1),
                end=match.end(1),
            )
        )
    return found
