import unicodedata


def _char_width(ch: str) -> int:
    """Calculate the width of a character in the terminal."""
    if len(ch) == 0:
        return 0
    # 制御文字
    if ch < " ":
        return 0
    # 結合文字 (濁点など)
    if unicodedata.combining(ch):
        return 0
    # 東アジア文字幅プロパティ
    # F: full-width, W: wide, A: ambiguous を2倍にして返す
    if unicodedata.east_asian_width(ch) in ("F", "W", "A"):
        return 2
    return 1


def _string_width(s: str) -> int:
    """Calculate the width of a string in the terminal."""
    return sum(map(_char_width, s))


def _clip_to_width(s: str, width: int) -> str:
    """Cut `s` so that its terminal width fits in `width` cells."""
    out: list[str] = []
    used = 0
    for ch in s:
        w = _char_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)


def _center_x(total_width: int, s: str) -> int:
    return max(0, (total_width - _string_width(s)) // 2)


def _scroll_offset(cursor: int | None, offset: int, height: int, total: int) -> int:
    """Return a list offset that keeps `cursor` inside a `height`-row window."""
    if height <= 0 or total <= 0:
        return 0
    if cursor is not None:
        if cursor < offset:
            offset = cursor
        elif cursor >= offset + height:
            offset = cursor - height + 1
    return max(0, min(offset, max(0, total - height)))
