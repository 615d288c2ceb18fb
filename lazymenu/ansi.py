"""Terminal cell-width measurement for plain text.

Entry names and values are laid out by display columns, not code points,
so wide characters and combining marks line up with the terminal grid.
"""

from __future__ import annotations

import unicodedata


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns, East Asian wide/fullwidth characters
    consume two, control characters are drawn as nothing.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.category(ch) in {"Cc", "Cf"}:
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in text)


def clip_length(text: str, max_cols: int) -> int:
    """Return how many leading characters of ``text`` fit in ``max_cols``."""
    if max_cols <= 0:
        return 0
    used = 0
    for idx, ch in enumerate(text):
        width = char_display_width(ch)
        if used + width > max_cols:
            return idx
        used += width
    return len(text)


def clip_text(text: str, max_cols: int) -> str:
    return text[: clip_length(text, max_cols)]
