"""Intermediate representation dataclasses for alignment and captions.

WHY: The recognizer collaborator, the aligner, the caption chunker, and
the persistence collaborator all exchange the same handful of records.
A single well-typed set of dataclasses keeps those stages decoupled.

HOW: Frozen dataclasses form two hierarchies:
  inputs:      RecognizedWord, ScriptSegment
  alignment:   WordTiming → SegmentTiming → AlignmentResult
  realignment: RealignedSegment
  captions:    OneLine | TwoLines → CaptionChunk → ChunkedSegment → CaptionBatch

RULES:
- Every record is immutable; a new run produces new records
- Sequences are stored as tuples so frozen records stay frozen
- All times are float seconds
- Confidence values are always within [0, 1]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

# Alignment quality labels
QUALITY_HIGH = "high"
QUALITY_MEDIUM = "medium"
QUALITY_LOW = "low"

# Timing precision labels
PRECISION_FRAME = "frame"
PRECISION_MILLISECOND = "millisecond"

# Caption chunk types
CHUNK_DIALOGUE = "dialogue"
CHUNK_PAUSE = "pause"
CHUNK_CONTINUATION = "continuation"

DEFAULT_RECOGNIZER_CONFIDENCE = 0.9


# ---------------------------------------------------------------------------
# Collaborator inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecognizedWord:
    """One word emitted by the external speech recognizer.

    RULES:
    - start/end are seconds, end > start for well-formed input
    - confidence defaults to 0.9 when the recognizer omits it
    """

    text: str
    start: float
    end: float
    confidence: float = DEFAULT_RECOGNIZER_CONFIDENCE


@dataclass(frozen=True)
class ScriptSegment:
    """One narrative unit authored before the audio existed.

    start_time/end_time/duration are only present when an editor has
    already pinned the segment's boundaries (the realign flow).
    """

    id: str
    text: str
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    duration: Optional[float] = None


# ---------------------------------------------------------------------------
# Alignment output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WordTiming:
    """Alignment output for a single script word.

    WHY: Caption sync and lip sync need per-word timing plus an honest
    measure of how much that timing can be trusted.

    RULES:
    - end >= start
    - confidence is min(match score, recognizer confidence) for matches,
      0.3 for context estimates, 0.5 for even-spread estimates
    - frame_start/frame_end are start/end snapped to the run's frame rate
    - phonetic_match_score is the raw match score, None for estimates
    """

    word: str
    start: float
    end: float
    confidence: float
    frame_start: float
    frame_end: float
    phonetic_match_score: Optional[float] = None

    @property
    def is_estimated(self) -> bool:
        return self.phonetic_match_score is None


@dataclass(frozen=True)
class SegmentTiming:
    """Aggregated word timings for one script segment.

    RULES:
    - start_time = min(word.start), end_time = max(word.end)
    - duration = end_time - start_time
    - word_timings keeps the script's word order
    """

    segment_id: str
    text: str
    start_time: float
    end_time: float
    duration: float
    word_timings: Tuple[WordTiming, ...]

    @classmethod
    def from_word_timings(
        cls, segment_id: str, text: str, word_timings: Tuple[WordTiming, ...]
    ) -> SegmentTiming:
        """Build a SegmentTiming whose bounds are derived from its words.

        Raises:
            ValueError: If word_timings is empty.
        """
        if not word_timings:
            raise ValueError(
                "Segment {!r} has no word timings to aggregate".format(segment_id)
            )
        start = min(w.start for w in word_timings)
        end = max(w.end for w in word_timings)
        return cls(
            segment_id=segment_id,
            text=text,
            start_time=start,
            end_time=end,
            duration=end - start,
            word_timings=tuple(word_timings),
        )

    @property
    def mean_confidence(self) -> float:
        if not self.word_timings:
            return 0.0
        return sum(w.confidence for w in self.word_timings) / len(self.word_timings)


@dataclass(frozen=True)
class AlignmentResult:
    """The complete result of one alignment run.

    RULES:
    - segment_timings follow the input segment order (degenerate
      segments are absent)
    - word_count is the number of recognizer words in the run
    - speaking_rate = 60 * word_count / total_duration (0 if no duration)
    - confidence_score is the mean of per-segment mean word confidence
    - alignment_quality: > 0.8 high, > 0.6 medium, else low
    - success is False only when the recognizer produced no words
    """

    success: bool
    segment_timings: Tuple[SegmentTiming, ...]
    word_count: int
    speaking_rate: float
    confidence_score: float
    alignment_quality: str
    frame_rate: float
    timing_precision: str
    total_duration: float
    error: Optional[str] = None


@dataclass(frozen=True)
class RealignedSegment:
    """A segment with editor-pinned boundaries plus attached word timings.

    RULES:
    - id, text, start_time, end_time, duration are copied unchanged
    - word_timings holds only confident matches; may be empty
    """

    id: str
    text: str
    start_time: Optional[float]
    end_time: Optional[float]
    duration: Optional[float]
    word_timings: Tuple[WordTiming, ...] = ()


# ---------------------------------------------------------------------------
# Caption output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OneLine:
    """Caption layout that fits on a single line."""

    text: str

    @property
    def lines(self) -> Tuple[str, ...]:
        return (self.text,)


@dataclass(frozen=True)
class TwoLines:
    """Caption layout wrapped onto two lines (top, bottom)."""

    top: str
    bottom: str

    @property
    def lines(self) -> Tuple[str, ...]:
        return (self.top, self.bottom)


LineLayout = Union[OneLine, TwoLines]


@dataclass(frozen=True)
class CaptionChunk:
    """One displayed caption unit.

    WHY: Players and editors need caption text, frame-exact timing, and
    the line layout, plus confidence so low-trust captions can be flagged.

    RULES:
    - start_time/end_time are frame-quantized; duration is the frame
      count over the frame rate (end - start within float precision)
    - layout holds 1 or 2 lines reconstructed from text
    - confidence is 0.95 for semantic phrases, 0.8 for fixed windows
    """

    id: str
    text: str
    start_time: float
    end_time: float
    duration: float
    word_count: int
    char_count: int
    layout: LineLayout
    confidence: float
    type: str = CHUNK_DIALOGUE

    @property
    def lines(self) -> Tuple[str, ...]:
        return self.layout.lines

    @property
    def line_count(self) -> int:
        return len(self.layout.lines)


@dataclass(frozen=True)
class ChunkedSegment:
    """One SegmentTiming's caption chunks plus derived statistics.

    RULES:
    - duration_drift = |sum(chunk durations) - segment duration|; clamping
      chunk durations is not renormalised, so drift is reported not fixed
    - reading_difficulty is easy, medium, or hard
    """

    segment_id: str
    original_text: str
    caption_chunks: Tuple[CaptionChunk, ...]
    total_chunks: int
    avg_chunk_duration: float
    reading_difficulty: str
    duration_drift: float


@dataclass(frozen=True)
class CaptionBatch:
    """Captions for every segment of one alignment run."""

    segments: Tuple[ChunkedSegment, ...]
    total_chunks: int
    avg_words_per_chunk: float
    avg_chars_per_chunk: float
    estimated_reading_speed: float
    quality_score: int
