from mcglsl.models import Range


def line_range(lines: list[str], line: int) -> Range | None:
    """Span the non-whitespace text of ``line``, or ``None`` if the line does not exist."""
    if line < 0 or line >= len(lines):
        return None
    text = lines[line]
    if not text.strip():
        return Range.on_line(line, 0, 0)
    start = len(text) - len(text.lstrip())
    end = len(text.rstrip())
    return Range.on_line(line, start, end)


def split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").split("\n")
