"""Caption chunker: segment timings → timed, laid-out caption chunks.

WHY: An aligned segment is usually too long to show as one caption. It
has to be cut into phrases, each phrase given a slice of the segment's
time, snapped to frames, and wrapped onto at most two lines.

HOW: Per segment:
  1. Normalise whitespace.
  2. split_phrases() → SemanticSplit or FallbackSplit.
  3. Each phrase gets time proportional to its share of the segment's
     words, clamped to the standard's [min_duration, max_duration].
  4. Times are laid out in whole frames: the first chunk starts at the
     frame nearest the segment start, each chunk starts where the
     previous one ended, and its frame count stays within the frame
     equivalents of the duration bounds.
  5. split_lines() wraps each phrase; confidence comes from the split
     variant; every chunk is tagged "dialogue".
create_captions() runs this for every segment of an alignment
concurrently and adds batch statistics and the quality score.

RULES:
- Clamped durations are NOT renormalised to the segment duration; the
  resulting drift is reported as ChunkedSegment.duration_drift
- Chunks never overlap; duration is the whole frame count over the frame
  rate, equal to end_time - start_time within float precision
- A segment timing with no words produces no chunks
- The chunker itself performs no I/O; only the splitter collaborator does
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, List, Optional, Sequence, Tuple

from script_sync.captions.lines import split_lines
from script_sync.captions.phrases import PhraseSplit, split_phrases
from script_sync.captions.presets import (
    PRESET_BROADCAST,
    CaptionStandard,
    get_standard,
    reading_speed,
)
from script_sync.captions.quality import score_captions
from script_sync.config import DEFAULT_CAPTION_PRESET, DEFAULT_CONTENT_TYPE, DEFAULT_FRAME_RATE
from script_sync.core.frames import from_frame, to_frame
from script_sync.core.ir import (
    CHUNK_DIALOGUE,
    AlignmentResult,
    CaptionBatch,
    CaptionChunk,
    ChunkedSegment,
    SegmentTiming,
)

logger = logging.getLogger(__name__)

DIFFICULTY_EASY = "easy"
DIFFICULTY_MEDIUM = "medium"
DIFFICULTY_HARD = "hard"

# Float slack when converting duration bounds to whole frames
_FRAME_EPSILON = 1e-9


def _frame_bounds(standard: CaptionStandard, frame_rate: float) -> Tuple[int, int]:
    """Smallest and largest frame counts a caption may span."""
    min_frames = max(1, math.ceil(standard.min_duration * frame_rate - _FRAME_EPSILON))
    max_frames = math.floor(standard.max_duration * frame_rate + _FRAME_EPSILON)
    # Durations are frames / frame_rate; keep them inside the bounds exactly
    while min_frames / frame_rate < standard.min_duration:
        min_frames += 1
    while max_frames > 0 and max_frames / frame_rate > standard.max_duration:
        max_frames -= 1
    if max_frames < min_frames:
        raise ValueError(
            "Frame rate {!r} leaves no whole-frame caption duration in [{}, {}]".format(
                frame_rate, standard.min_duration, standard.max_duration
            )
        )
    return min_frames, max_frames


def allocate_duration(
    phrase_words: int,
    segment_words: int,
    segment_duration: float,
    standard: CaptionStandard = PRESET_BROADCAST,
) -> float:
    """Proportional share of the segment duration, clamped to the standard."""
    share = (phrase_words / segment_words) * segment_duration
    return max(standard.min_duration, min(standard.max_duration, share))


def build_chunks(
    segment: SegmentTiming,
    split: PhraseSplit,
    standard: CaptionStandard = PRESET_BROADCAST,
    frame_rate: float = 30.0,
) -> Tuple[CaptionChunk, ...]:
    """Time and lay out the phrases of one segment.

    Args:
        segment: The aligned segment supplying start time and duration.
        split: Phrases for the segment, tagged with their origin.
        standard: Caption limits.
        frame_rate: Frame rate that chunk boundaries snap to.

    Returns:
        Caption chunks in phrase order.
    """
    segment_words = len(segment.text.split())
    if not segment_words or not split.phrases:
        return ()

    min_frames, max_frames = _frame_bounds(standard, frame_rate)
    start_frame = to_frame(segment.start_time, frame_rate)

    chunks: List[CaptionChunk] = []
    for index, phrase in enumerate(split.phrases):
        text = " ".join(phrase.split())
        word_count = len(text.split())
        duration = allocate_duration(word_count, segment_words, segment.duration, standard)
        frames = min(max_frames, max(min_frames, round(duration * frame_rate)))
        end_frame = start_frame + frames

        start_time = from_frame(start_frame, frame_rate)
        end_time = from_frame(end_frame, frame_rate)
        chunks.append(CaptionChunk(
            id="{}_chunk_{}".format(segment.segment_id, index),
            text=text,
            start_time=start_time,
            end_time=end_time,
            duration=frames / frame_rate,
            word_count=word_count,
            char_count=len(text),
            layout=split_lines(text, standard.max_chars_per_line),
            confidence=split.confidence,
            type=CHUNK_DIALOGUE,
        ))
        start_frame = end_frame

    return tuple(chunks)


def reading_difficulty(chunks: Sequence[CaptionChunk], target_wpm: float) -> str:
    """Classify how hard the chunks are to read at the target speed.

    Actual WPM is the average words per chunk over the average chunk
    duration. Below 80% of target is easy, above 120% is hard.
    """
    if not chunks:
        return DIFFICULTY_EASY
    avg_words = sum(c.word_count for c in chunks) / len(chunks)
    avg_duration = sum(c.duration for c in chunks) / len(chunks)
    if avg_duration <= 0:
        return DIFFICULTY_HARD

    actual_wpm = (avg_words / avg_duration) * 60
    if actual_wpm < target_wpm * 0.8:
        return DIFFICULTY_EASY
    if actual_wpm > target_wpm * 1.2:
        return DIFFICULTY_HARD
    return DIFFICULTY_MEDIUM


async def chunk_segment(
    segment: SegmentTiming,
    target_wpm: float,
    standard: CaptionStandard = PRESET_BROADCAST,
    splitter: Optional[Any] = None,
    frame_rate: float = 30.0,
) -> ChunkedSegment:
    """Split one aligned segment into caption chunks.

    WHY: This is the per-segment unit of the captioning path. The only
    suspension point is the semantic splitter call.

    Args:
        segment: Aligned segment timing.
        target_wpm: Reading speed used to grade reading difficulty.
        standard: Caption limits.
        splitter: Semantic splitter collaborator (async split(text)), or
                  None to use fixed windows directly.
        frame_rate: Frame rate that chunk boundaries snap to.

    Returns:
        ChunkedSegment with chunks and derived statistics.
    """
    text = " ".join(segment.text.split())
    if text:
        split = await split_phrases(text, splitter, standard.fallback_window_words)
        chunks = build_chunks(segment, split, standard, frame_rate)
    else:
        chunks = ()

    total = sum(c.duration for c in chunks)
    return ChunkedSegment(
        segment_id=segment.segment_id,
        original_text=segment.text,
        caption_chunks=chunks,
        total_chunks=len(chunks),
        avg_chunk_duration=total / len(chunks) if chunks else 0.0,
        reading_difficulty=reading_difficulty(chunks, target_wpm),
        duration_drift=abs(total - segment.duration) if chunks else 0.0,
    )


async def create_captions(
    alignment: AlignmentResult,
    content_type: str = DEFAULT_CONTENT_TYPE,
    standard: Optional[CaptionStandard] = None,
    splitter: Optional[Any] = None,
) -> CaptionBatch:
    """Create caption chunks for every aligned segment of a run.

    WHY: The public entry point of the captioning path. Segments missing
    from the alignment (empty text) simply have no captions.

    HOW: Resolves the caption standard (the SCRIPT_SYNC_CAPTION_PRESET
    preset when none is given) and the content type's reading speed,
    chunks every segment timing concurrently with asyncio.gather (order
    preserved), then computes batch averages and the quality score.

    Raises:
        ValueError: If content_type or the configured preset is not
            recognized.
    """
    if standard is None:
        standard = get_standard(DEFAULT_CAPTION_PRESET)
    target_wpm = reading_speed(content_type, standard)
    frame_rate = alignment.frame_rate or DEFAULT_FRAME_RATE

    segments = await asyncio.gather(*(
        chunk_segment(s, target_wpm, standard, splitter, frame_rate)
        for s in alignment.segment_timings
    ))

    chunks = [c for s in segments for c in s.caption_chunks]
    total_chunks = len(chunks)
    avg_words = sum(c.word_count for c in chunks) / total_chunks if chunks else 0.0
    avg_chars = sum(c.char_count for c in chunks) / total_chunks if chunks else 0.0

    logger.info(
        "Created %d caption chunks (avg %.1f words/chunk)", total_chunks, avg_words
    )
    return CaptionBatch(
        segments=tuple(segments),
        total_chunks=total_chunks,
        avg_words_per_chunk=avg_words,
        avg_chars_per_chunk=avg_chars,
        estimated_reading_speed=target_wpm,
        quality_score=score_captions(segments, standard),
    )
