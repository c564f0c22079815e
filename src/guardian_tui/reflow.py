from __future__ import annotations

from typing import List

HYPHEN = "-"


def wrap(text: str, width: int) -> str:
    """
    Insert line breaks into ``text`` so that no line is longer than ``width``.

    A break is placed at the nearest whitespace within ``width // 5``
    characters before each candidate position. The window includes both
    ends, ``idx`` itself down to ``idx - width // 5``, so ``width // 5 + 1``
    positions are checked and a space sitting exactly at the candidate is
    used even for widths under 5. When there is none, the word is split and
    a hyphen marks the split. Existing line breaks are kept.
    """
    if width <= 0:
        raise ValueError(f"wrap width must be positive, got {width}")
    return "\n".join(_wrap_line(line, width) for line in text.split("\n"))


def _wrap_line(line: str, width: int) -> str:
    if len(line) <= width:
        return line

    lookback = width // 5
    segments: List[str] = []
    start = 0
    while len(line) - start > width:
        idx = start + width
        for pos in range(idx, idx - lookback - 1, -1):
            if line[pos].isspace():
                segments.append(line[start:pos])
                start = pos + 1
                break
        else:
            if width == 1:
                segments.append(line[start:idx])
                start = idx
            else:
                segments.append(line[start : idx - 1] + HYPHEN)
                start = idx - 1
    segments.append(line[start:])
    return "\n".join(segments)
