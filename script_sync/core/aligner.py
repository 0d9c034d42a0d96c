"""Word aligner and segment timing aggregator.

WHY: The script is authored before any audio exists, while the recognizer
only knows what it heard. To drive captions and lip sync, each script
word has to be re-associated with the recognizer timestamp it most likely
corresponds to, despite mishearings, respellings, and vocabulary drift.

HOW: Per segment, a cursor walks the recognizer word stream:
  1. Tokenize the segment text into lowercase words.
  2. For each script word, score the next 10 recognizer words from the
     cursor with combined_score(); accept the best if it beats 0.6 and
     move the cursor just past it.
  3. Words without a confident match get a context estimate (length-based
     duration, anchored to the nearest accepted match), confidence 0.3.
  4. Segments that cannot be timed at all are spread evenly after the
     last recognizer timestamp, confidence 0.5.
  5. Word timings aggregate into a SegmentTiming; corpus statistics
     (speaking rate, mean confidence, quality label) are computed once
     all segments are done.

RULES:
- The cursor is local to one segment; every segment searches the same
  full, read-only recognizer word list starting from its own start index
- Partial mismatches never raise; low confidence is the signal
- Only an empty recognizer transcript aborts a run (RecognitionUnavailable)
- Segments with empty text are skipped, never raised on
- Output segment order always equals input order
"""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from script_sync.config import DEFAULT_FRAME_RATE
from script_sync.core.frames import quantize
from script_sync.core.ir import (
    PRECISION_FRAME,
    PRECISION_MILLISECOND,
    QUALITY_HIGH,
    QUALITY_LOW,
    QUALITY_MEDIUM,
    AlignmentResult,
    RecognizedWord,
    ScriptSegment,
    SegmentTiming,
    WordTiming,
)
from script_sync.core.similarity import combined_score

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MATCH_WINDOW = 10
MATCH_THRESHOLD = 0.6

AVG_WORD_DURATION_S = 0.6
ESTIMATED_CONFIDENCE = 0.3

SPREAD_DEFAULT_WORD_DURATION_S = 0.5
SPREAD_CONFIDENCE = 0.5

HIGH_QUALITY_THRESHOLD = 0.8
MEDIUM_QUALITY_THRESHOLD = 0.6

RECOGNITION_UNAVAILABLE_MESSAGE = (
    "Speech recognizer returned no words; alignment is unavailable"
)


class RecognitionUnavailable(ValueError):
    """Raised when the recognizer transcript is empty and alignment is required.

    WHY: With zero recognizer words there is nothing to align against;
    every timing would be invented. Strict callers need to know that.

    RULES:
    - Only raised by align(..., strict=True)
    - Non-strict callers get an AlignmentResult with success=False instead
    """


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def tokenize(text: str) -> List[str]:
    """Split segment text into lowercase words."""
    return text.lower().split()


def find_best_match(
    target: str,
    words: Sequence[RecognizedWord],
    cursor: int,
    window: int = MATCH_WINDOW,
    threshold: float = MATCH_THRESHOLD,
) -> Optional[Tuple[int, float]]:
    """Find the best recognizer word for target in the window at cursor.

    Returns:
        (index, score) of the best candidate scoring above threshold, or
        None. Ties keep the earliest candidate.
    """
    best_index = -1
    best_score = 0.0
    for i in range(cursor, min(cursor + window, len(words))):
        score = combined_score(words[i].text, target)
        if score > best_score and score > threshold:
            best_index = i
            best_score = score
    if best_index < 0:
        return None
    return best_index, best_score


def match_words(
    targets: Sequence[str],
    words: Sequence[RecognizedWord],
    start_index: int = 0,
) -> List[Optional[Tuple[int, float]]]:
    """Match each target word against the recognizer stream.

    The cursor starts at start_index, only moves forward, and only moves
    on an accepted match. Returns one (index, score) or None per target.
    """
    cursor = start_index
    matches: List[Optional[Tuple[int, float]]] = []
    for target in targets:
        match = find_best_match(target, words, cursor)
        if match is not None:
            cursor = match[0] + 1
        matches.append(match)
    return matches


# ---------------------------------------------------------------------------
# Timing construction
# ---------------------------------------------------------------------------


def estimate_duration(word: str) -> float:
    """Estimated spoken duration of a word, longer words taking longer."""
    return AVG_WORD_DURATION_S * max(0.3, len(word) / 6)


def word_timing(
    word: str,
    start: float,
    end: float,
    confidence: float,
    frame_rate: float,
    score: Optional[float] = None,
) -> WordTiming:
    """Build a WordTiming with frame fields snapped to frame_rate."""
    return WordTiming(
        word=word,
        start=start,
        end=end,
        confidence=confidence,
        frame_start=quantize(start, frame_rate),
        frame_end=quantize(end, frame_rate),
        phonetic_match_score=score,
    )


def _spread_timings(
    targets: Sequence[str],
    words: Sequence[RecognizedWord],
    frame_rate: float,
) -> Tuple[WordTiming, ...]:
    """Spread words evenly after the last known recognizer timestamp."""
    if words:
        span = max(w.end for w in words) - min(w.start for w in words)
        per_word = span / len(words)
        base = words[-1].end
    else:
        per_word = SPREAD_DEFAULT_WORD_DURATION_S
        base = 0.0

    return tuple(
        word_timing(
            target,
            base + i * per_word,
            base + (i + 1) * per_word,
            SPREAD_CONFIDENCE,
            frame_rate,
        )
        for i, target in enumerate(targets)
    )


def align_segment(
    text: str,
    words: Sequence[RecognizedWord],
    frame_rate: float = 30.0,
    start_index: int = 0,
) -> Tuple[WordTiming, ...]:
    """Align one segment's words against the recognizer word stream.

    WHY: This is the per-segment unit of work. It owns its cursor, so
    segments can be aligned independently and in parallel.

    HOW: First pass matches words with the forward-only cursor. Second
    pass estimates every unmatched word from the accepted matches only:
    it starts at the end of the previous accepted word; with none before
    it, it ends where the next accepted word starts; with no accepted
    word at all it starts at its index times 0.6s. Consecutive estimates
    share the same anchor. With an empty recognizer list every word is
    spread evenly instead.

    RULES:
    - Matched: recognizer start/end, confidence = min(score, recognizer
      confidence), phonetic_match_score = score
    - Estimated: confidence 0.3, phonetic_match_score None
    - Returns an empty tuple for empty text

    Args:
        text: Segment text.
        words: Recognizer words in temporal order (read-only).
        frame_rate: Frame rate for frame_start/frame_end.
        start_index: Recognizer index the cursor starts at.

    Returns:
        One WordTiming per script word, in script order.
    """
    targets = tokenize(text)
    if not targets:
        return ()
    if not words:
        logger.warning("No recognizer words for segment %r; spreading evenly", text)
        return _spread_timings(targets, words, frame_rate)

    timings: List[Optional[WordTiming]] = []
    for target, match in zip(targets, match_words(targets, words, start_index)):
        if match is None:
            timings.append(None)
            continue
        index, score = match
        heard = words[index]
        timings.append(word_timing(
            target,
            heard.start,
            heard.end,
            min(score, heard.confidence),
            frame_rate,
            score,
        ))

    # Estimates anchor to accepted matches only, never to other estimates
    accepted = tuple(timings)
    for i, timing in enumerate(accepted):
        if timing is not None:
            continue
        duration = estimate_duration(targets[i])
        previous = next((t for t in reversed(accepted[:i]) if t is not None), None)
        following = next((t for t in accepted[i + 1:] if t is not None), None)
        if previous is not None:
            start = previous.end
        elif following is not None:
            start = max(0.0, following.start - duration)
        else:
            start = i * AVG_WORD_DURATION_S
        timings[i] = word_timing(
            targets[i], start, start + duration, ESTIMATED_CONFIDENCE, frame_rate
        )

    return tuple(timings)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def quality_label(confidence: float) -> str:
    """Map a mean confidence to high / medium / low."""
    if confidence > HIGH_QUALITY_THRESHOLD:
        return QUALITY_HIGH
    if confidence > MEDIUM_QUALITY_THRESHOLD:
        return QUALITY_MEDIUM
    return QUALITY_LOW


def recognition_unavailable_result(frame_rate: float) -> AlignmentResult:
    """The structurally complete result for an empty recognizer transcript."""
    return AlignmentResult(
        success=False,
        segment_timings=(),
        word_count=0,
        speaking_rate=0.0,
        confidence_score=0.0,
        alignment_quality=QUALITY_LOW,
        frame_rate=frame_rate,
        timing_precision=PRECISION_MILLISECOND,
        total_duration=0.0,
        error=RECOGNITION_UNAVAILABLE_MESSAGE,
    )


def summarize(
    segment_timings: Sequence[SegmentTiming],
    words: Sequence[RecognizedWord],
    frame_rate: float,
    total_duration: Optional[float] = None,
) -> AlignmentResult:
    """Compute corpus-level statistics for a finished alignment run.

    RULES:
    - total_duration defaults to the last recognizer word end
    - speaking_rate = 60 * len(words) / total_duration, 0 without duration
    - confidence_score = mean of per-segment mean confidence, 0 without
      segments
    """
    if total_duration is None:
        total_duration = max((w.end for w in words), default=0.0)
    word_count = len(words)
    speaking_rate = (word_count * 60.0) / total_duration if total_duration > 0 else 0.0

    if segment_timings:
        confidence = sum(s.mean_confidence for s in segment_timings) / len(segment_timings)
    else:
        confidence = 0.0

    return AlignmentResult(
        success=True,
        segment_timings=tuple(segment_timings),
        word_count=word_count,
        speaking_rate=speaking_rate,
        confidence_score=confidence,
        alignment_quality=quality_label(confidence),
        frame_rate=frame_rate,
        timing_precision=PRECISION_FRAME,
        total_duration=total_duration,
    )


def align(
    segments: Sequence[ScriptSegment],
    words: Sequence[RecognizedWord],
    frame_rate: float = DEFAULT_FRAME_RATE,
    total_duration: Optional[float] = None,
    strict: bool = False,
    max_workers: Optional[int] = None,
) -> AlignmentResult:
    """Align script segments against a recognizer transcript.

    WHY: This is the public entry point of the alignment stage. It turns
    a script and a noisy word-timestamped transcript into frame-accurate
    segment timings plus a coarse quality verdict.

    HOW: Skips segments with empty text, aligns the rest with
    align_segment() (optionally on a thread pool), aggregates each into
    a SegmentTiming, then computes run statistics with summarize().

    RULES:
    - Empty recognizer transcript: raises RecognitionUnavailable when
      strict, otherwise returns recognition_unavailable_result()
    - max_workers > 1 aligns segments in parallel; order is preserved
    - Raises ValueError for a non-positive frame rate

    Args:
        segments: Script segments in presentation order.
        words: Recognizer words in temporal order.
        frame_rate: Video frame rate used for quantization
                    (SCRIPT_SYNC_FRAME_RATE, 30 by default).
        total_duration: Audio duration reported by the recognizer, if any.
        strict: Raise instead of returning a failed result on empty input.
        max_workers: Thread pool size for parallel segment alignment.

    Returns:
        AlignmentResult for the run.
    """
    if frame_rate <= 0:
        raise ValueError("frame_rate must be positive, got {!r}".format(frame_rate))

    if not words:
        logger.warning("Recognizer transcript is empty; %d segments not aligned", len(segments))
        if strict:
            raise RecognitionUnavailable(RECOGNITION_UNAVAILABLE_MESSAGE)
        return recognition_unavailable_result(frame_rate)

    alignable = [s for s in segments if tokenize(s.text)]
    skipped = len(segments) - len(alignable)
    if skipped:
        logger.info("Skipping %d segment(s) with empty text", skipped)

    def _align_one(segment: ScriptSegment) -> SegmentTiming:
        return SegmentTiming.from_word_timings(
            segment.id, segment.text, align_segment(segment.text, words, frame_rate)
        )

    if max_workers is not None and max_workers > 1 and len(alignable) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            segment_timings = list(pool.map(_align_one, alignable))
    else:
        segment_timings = [_align_one(s) for s in alignable]

    result = summarize(segment_timings, words, frame_rate, total_duration)
    logger.info(
        "Aligned %d segments: %.1f WPM, confidence %.2f, quality %s",
        len(segment_timings),
        result.speaking_rate,
        result.confidence_score,
        result.alignment_quality,
    )
    return result


def analyze_segment_timing(
    text: str,
    words: Sequence[RecognizedWord],
    estimated_start_time: float = 0.0,
    frame_rate: float = DEFAULT_FRAME_RATE,
) -> Tuple[WordTiming, ...]:
    """Word timings for one ad-hoc segment, shifted to an estimated start.

    WHY: The editor times a single segment against audio recorded on its
    own, then drops it at a known position on the timeline.

    HOW: Aligns the text as a one-segment run, then shifts every word so
    the earliest word starts at estimated_start_time.

    RULES:
    - Returns an empty tuple when the run fails or the text is empty
    - Frame fields are re-quantized after the shift
    """
    result = align([ScriptSegment(id="segment", text=text)], words, frame_rate)
    if not result.success or not result.segment_timings:
        return ()

    segment = result.segment_timings[0]
    offset = estimated_start_time - segment.start_time
    return tuple(
        dataclasses.replace(
            w,
            start=w.start + offset,
            end=w.end + offset,
            frame_start=quantize(w.start + offset, frame_rate),
            frame_end=quantize(w.end + offset, frame_rate),
        )
        for w in segment.word_timings
    )
