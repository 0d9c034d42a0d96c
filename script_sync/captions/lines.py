"""Line splitting for a single caption.

WHY: A caption longer than one line must wrap, and where it wraps matters:
balanced lines read faster, a break after a comma or before "and" reads
naturally, and broadcast convention prefers the top line to be shorter.

HOW: Scan split points within two words of the word midpoint. Each point
where both lines fit is scored by the length difference of the lines,
minus 5 when the break follows , ; : or precedes and/but/or/so. The
lowest score wins; with no fitting point the text is halved at the word
midpoint. If the top line ends up longer and moving the break one word
earlier still fits, the earlier break is used.

RULES:
- Text that fits within max_chars_per_line stays on one line
- Never produces more than two lines, never an empty line
- Whitespace is normalised before measuring
"""

import re

from script_sync.core.ir import LineLayout, OneLine, TwoLines

GOOD_BREAK_BONUS = 5
SEARCH_RADIUS = 2

_BREAK_AFTER_RE = re.compile(r"[,;:]$")
_BREAK_BEFORE_RE = re.compile(r"^(and|but|or|so)$", re.IGNORECASE)


def _is_good_break(words, split_index):
    """True if the break after words[split_index] is linguistically natural."""
    return bool(
        _BREAK_AFTER_RE.search(words[split_index])
        or _BREAK_BEFORE_RE.match(words[split_index + 1])
    )


def split_lines(text: str, max_chars_per_line: int) -> LineLayout:
    """Lay out caption text on one or two lines.

    Args:
        text: Caption text.
        max_chars_per_line: Line length limit in characters.

    Returns:
        OneLine if no wrap is needed (or possible), else TwoLines.
    """
    if max_chars_per_line <= 0:
        raise ValueError("max_chars_per_line must be positive")

    text = " ".join(text.split())
    if len(text) <= max_chars_per_line:
        return OneLine(text)

    words = text.split()
    midpoint = len(words) // 2

    # split_index is the last word of the top line; default is an even halving
    best_index = max(midpoint - 1, 0)
    best_score = None
    for i in range(midpoint - SEARCH_RADIUS, midpoint + SEARCH_RADIUS + 1):
        if i >= len(words) - 1:
            break
        if i < 0:
            continue

        line1 = " ".join(words[:i + 1])
        line2 = " ".join(words[i + 1:])
        if len(line1) > max_chars_per_line or len(line2) > max_chars_per_line:
            continue

        score = abs(len(line1) - len(line2))
        if _is_good_break(words, i):
            score -= GOOD_BREAK_BONUS
        if best_score is None or score < best_score:
            best_index = i
            best_score = score

    line1 = " ".join(words[:best_index + 1])
    line2 = " ".join(words[best_index + 1:])
    if not line2:
        return OneLine(line1)

    # Prefer a shorter top line when the shifted break still fits
    if len(line1) > len(line2) and best_index > 0:
        alt1 = " ".join(words[:best_index])
        alt2 = " ".join(words[best_index:])
        if len(alt1) <= max_chars_per_line and len(alt2) <= max_chars_per_line:
            return TwoLines(alt1, alt2)

    return TwoLines(line1, line2)
