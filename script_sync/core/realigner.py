"""Boundary-preserving segment realignment.

WHY: Once an editor has pinned a segment's start and end on the timeline,
re-running full alignment must not move it. Captions still need word
timing inside the segment, so word timings are attached while the
segment's own boundaries stay exactly as they were.

HOW: Uses the aligner's cursor/window/threshold matching per segment.
Only confident matches become word timings; context estimates are not
produced because they would be anchored to the recognizer stream rather
than the pinned boundaries. The cursor starts at the first recognizer
word that ends after the segment's pinned start (index 0 when the
segment has no start).

RULES:
- start_time, end_time, duration are copied unchanged, never derived
- A segment with no matches is returned with empty word_timings
- Never raises for mismatches or empty recognizer input
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from script_sync.config import DEFAULT_FRAME_RATE
from script_sync.core.aligner import match_words, tokenize, word_timing
from script_sync.core.ir import RealignedSegment, RecognizedWord, ScriptSegment, WordTiming


def _cursor_start(words: Sequence[RecognizedWord], start_time: Optional[float]) -> int:
    """Index of the first recognizer word ending after start_time."""
    if start_time is None:
        return 0
    for i, word in enumerate(words):
        if word.end > start_time:
            return i
    return len(words)


def realign_segment(
    segment: ScriptSegment,
    words: Sequence[RecognizedWord],
    frame_rate: float = 30.0,
) -> RealignedSegment:
    """Attach matched word timings to one segment without moving it."""
    targets = tokenize(segment.text)
    start_index = _cursor_start(words, segment.start_time)

    word_timings: List[WordTiming] = []
    for target, match in zip(targets, match_words(targets, words, start_index)):
        if match is None:
            continue
        index, score = match
        heard = words[index]
        word_timings.append(word_timing(
            target,
            heard.start,
            heard.end,
            min(score, heard.confidence),
            frame_rate,
            score,
        ))

    return RealignedSegment(
        id=segment.id,
        text=segment.text,
        start_time=segment.start_time,
        end_time=segment.end_time,
        duration=segment.duration,
        word_timings=tuple(word_timings),
    )


def realign(
    segments: Sequence[ScriptSegment],
    words: Sequence[RecognizedWord],
    frame_rate: float = DEFAULT_FRAME_RATE,
) -> List[RealignedSegment]:
    """Attach word timings to every segment, preserving pinned boundaries.

    Unlike align(), which starts every segment's cursor at recognizer
    index 0, each segment here starts at the first recognizer word ending
    after its pinned start_time, so a phrase repeated in the script
    matches the occurrence inside its own boundaries.

    Args:
        segments: Segments whose start/end were fixed by the editor.
        words: Recognizer words in temporal order (read-only).
        frame_rate: Frame rate for frame_start/frame_end.

    Returns:
        One RealignedSegment per input segment, in input order.
    """
    if frame_rate <= 0:
        raise ValueError("frame_rate must be positive, got {!r}".format(frame_rate))
    return [realign_segment(segment, words, frame_rate) for segment in segments]
