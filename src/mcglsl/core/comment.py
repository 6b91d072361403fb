def scan_line(in_block: bool, line: str) -> tuple[bool, str]:
    """Blank out commented text on a single line.

    Returns the block-comment state after the line and the line with every
    commented character replaced by a space, so column offsets are preserved.
    Double-quoted spans are left alone so include paths containing ``//``
    are not cut short.
    """
    out: list[str] = []
    in_quote = False
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        pair = line[i : i + 2]
        if in_block:
            if pair == "*/":
                in_block = False
                out.append("  ")
                i += 2
                continue
            out.append(" " if ch not in "\r\n" else ch)
            i += 1
            continue
        if in_quote:
            if ch == '"':
                in_quote = False
            out.append(ch)
            i += 1
            continue
        if ch == '"':
            in_quote = True
            out.append(ch)
            i += 1
            continue
        if pair == "//":
            out.append(" " * (n - i))
            break
        if pair == "/*":
            in_block = True
            out.append("  ")
            i += 2
            continue
        out.append(ch)
        i += 1
    return in_block, "".join(out)


def strip_comments(lines: list[str]) -> list[str]:
    """Apply :func:`scan_line` over a whole buffer."""
    in_block = False
    stripped: list[str] = []
    for line in lines:
        in_block, blanked = scan_line(in_block, line)
        stripped.append(blanked)
    return stripped
