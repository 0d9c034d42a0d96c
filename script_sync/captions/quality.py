"""Caption quality scoring against broadcast readability heuristics.

WHY: Caption output needs a single number for regression tests and UX
feedback: did a change make the captions easier or harder to read?

HOW: Start at 100 and apply independent per-chunk deltas:
  -5  duration below min_duration
  -5  duration above max_duration
  -3  more characters than fit on max_lines lines
  +2  4-8 words (ideal readability)
  -2  fewer than 2 or more than 12 words
  +1  ends with . ! ? , ; :
  -3  ends with an article, preposition, or conjunction
  -5  last chunk of a segment with a single word (orphan)
  -2  single word longer than 15 characters
The total is clamped to [0, 100] once, at the end.

RULES:
- Pure and deterministic; deltas are additive so order does not matter
"""

import re
from typing import Sequence

from script_sync.captions.presets import PRESET_BROADCAST, CaptionStandard
from script_sync.core.ir import CaptionChunk, ChunkedSegment

_TERMINAL_PUNCT_RE = re.compile(r"[.!?,;:]$")
_WEAK_ENDING_RE = re.compile(r"\b(the|a|an|to|of|in|and|or|but)$", re.IGNORECASE)

IDEAL_MIN_WORDS = 4
IDEAL_MAX_WORDS = 8
LONG_WORD_CHARS = 15


def chunk_delta(
    chunk: CaptionChunk,
    is_last: bool,
    standard: CaptionStandard = PRESET_BROADCAST,
) -> int:
    """Score adjustment contributed by a single chunk."""
    delta = 0

    if chunk.duration < standard.min_duration:
        delta -= 5
    if chunk.duration > standard.max_duration:
        delta -= 5

    if chunk.char_count > standard.max_chars_per_caption:
        delta -= 3

    if IDEAL_MIN_WORDS <= chunk.word_count <= IDEAL_MAX_WORDS:
        delta += 2
    elif chunk.word_count < 2 or chunk.word_count > 12:
        delta -= 2

    text = chunk.text.strip()
    if _TERMINAL_PUNCT_RE.search(text):
        delta += 1
    if _WEAK_ENDING_RE.search(text):
        delta -= 3

    if chunk.word_count == 1 and is_last:
        delta -= 5
    if chunk.word_count == 1 and chunk.char_count > LONG_WORD_CHARS:
        delta -= 2

    return delta


def score_captions(
    segments: Sequence[ChunkedSegment],
    standard: CaptionStandard = PRESET_BROADCAST,
) -> int:
    """Score chunked segments from 0 (unreadable) to 100."""
    score = 100
    for segment in segments:
        last = len(segment.caption_chunks) - 1
        for index, chunk in enumerate(segment.caption_chunks):
            score += chunk_delta(chunk, index == last, standard)
    return max(0, min(100, score))
