"""Tests for the caption chunker.

WHY: Chunk timing drives what the viewer sees and when. Chunks that
overlap, flash too briefly, or linger too long are broadcast defects,
and the confidence value has to say whether the phrase boundaries came
from the semantic splitter or the fallback.

HOW: Segment timings are built directly so durations are exact; the
end-to-end path runs align() on the shared narration fixture and then
create_captions() via asyncio.run().

RULES:
- Duration bounds are checked exactly, with no tolerance
- Frame rate is 30 fps unless a test says otherwise
"""

import asyncio

import pytest

from script_sync.captions.chunker import (
    DIFFICULTY_EASY,
    DIFFICULTY_HARD,
    DIFFICULTY_MEDIUM,
    allocate_duration,
    build_chunks,
    chunk_segment,
    create_captions,
    reading_difficulty,
)
from script_sync.captions.phrases import BasePhraseSplitter, FallbackSplit, SemanticSplit
from script_sync.captions.presets import PRESET_BROADCAST, PRESET_SOCIAL
from script_sync.captions.quality import chunk_delta
from script_sync.core.aligner import align
from script_sync.core.ir import CHUNK_DIALOGUE, SegmentTiming, WordTiming

TOLERANCE = 1e-6


def _segment(text, start, duration, segment_id="s1"):
    timing = WordTiming(
        word="x", start=start, end=start + duration, confidence=0.9,
        frame_start=start, frame_end=start + duration,
    )
    return SegmentTiming(
        segment_id=segment_id,
        text=text,
        start_time=start,
        end_time=start + duration,
        duration=duration,
        word_timings=(timing,),
    )


def _words(n):
    return " ".join("w{}".format(i) for i in range(n))


class PhraseSplitter(BasePhraseSplitter):

    def __init__(self, phrases):
        self.phrases = phrases

    async def split(self, text):
        return self.phrases


class TestAllocateDuration:

    def test_proportional_share(self):
        assert allocate_duration(3, 12, 8.0) == pytest.approx(2.0)

    def test_clamped_to_minimum(self):
        assert allocate_duration(1, 20, 4.0) == PRESET_BROADCAST.min_duration

    def test_clamped_to_maximum(self):
        assert allocate_duration(6, 6, 20.0) == PRESET_BROADCAST.max_duration


class TestBuildChunks:

    def test_even_split(self):
        segment = _segment(_words(12), start=1.0, duration=6.0)
        split = FallbackSplit(("w0 w1 w2 w3 w4 w5", "w6 w7 w8 w9 w10 w11"))
        first, second = build_chunks(segment, split)

        assert first.id == "s1_chunk_0"
        assert second.id == "s1_chunk_1"
        assert first.start_time == pytest.approx(1.0)
        assert first.end_time == pytest.approx(4.0)
        assert second.end_time == pytest.approx(7.0)
        assert first.word_count == 6
        assert first.char_count == len("w0 w1 w2 w3 w4 w5")
        assert first.type == CHUNK_DIALOGUE

    def test_confidence_follows_split_variant(self):
        segment = _segment("a b c d", start=0.0, duration=2.0)
        semantic, = build_chunks(segment, SemanticSplit(("a b c d",)))
        fallback, = build_chunks(segment, FallbackSplit(("a b c d",)))

        assert semantic.confidence == 0.95
        assert fallback.confidence == 0.8

    def test_short_phrase_clamped_up(self):
        segment = _segment(_words(13), start=0.0, duration=6.5)
        split = FallbackSplit((_words(6), _words(6), "w12"))
        chunks = build_chunks(segment, split)

        assert chunks[-1].duration >= PRESET_BROADCAST.min_duration - TOLERANCE
        assert chunks[-1].duration == pytest.approx(25 / 30)

    def test_long_phrase_clamped_down(self):
        segment = _segment(_words(6), start=0.0, duration=20.0)
        chunk, = build_chunks(segment, FallbackSplit((_words(6),)))
        assert chunk.duration == pytest.approx(PRESET_BROADCAST.max_duration)

    @pytest.mark.parametrize("frame_rate", [23.976, 24, 25, 29.97, 30, 60])
    def test_duration_bounds_and_contiguity(self, frame_rate):
        segment = _segment(_words(40), start=3.37, duration=11.0)
        split = FallbackSplit(tuple(
            " ".join("w{}".format(i) for i in range(start, min(start + n, 40)))
            for start, n in [(0, 1), (1, 9), (10, 2), (12, 20), (32, 8)]
        ))
        chunks = build_chunks(segment, split, frame_rate=frame_rate)

        for chunk in chunks:
            assert PRESET_BROADCAST.min_duration <= chunk.duration
            assert chunk.duration <= PRESET_BROADCAST.max_duration
            assert chunk.duration == pytest.approx(chunk.end_time - chunk.start_time)
        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev.end_time == pytest.approx(nxt.start_time)

    def test_clamped_maximum_exact_at_later_start(self):
        text = "one two three four five six"
        segment = _segment(text, start=1.3, duration=20.0)
        chunk, = build_chunks(segment, FallbackSplit((text,)), frame_rate=30)

        assert chunk.duration == PRESET_BROADCAST.max_duration
        assert chunk_delta(chunk, is_last=True) == 2

    @pytest.mark.parametrize("frame_rate", [24, 25, 30, 60])
    def test_clamped_maximum_never_exceeded(self, frame_rate):
        for start_frame in range(0, 2000, 7):
            segment = _segment(_words(6), start=start_frame / frame_rate, duration=30.0)
            chunk, = build_chunks(segment, FallbackSplit((_words(6),)), frame_rate=frame_rate)
            assert chunk.duration <= PRESET_BROADCAST.max_duration

    def test_long_phrase_wraps_two_lines(self):
        text = "The quick brown fox jumps over the lazy sleeping dog"
        segment = _segment(text, start=0.0, duration=3.0)
        chunk, = build_chunks(segment, FallbackSplit((text,)))

        assert chunk.line_count == 2
        assert all(len(line) <= 42 for line in chunk.lines)

    def test_social_preset_line_limit(self):
        text = "Short lines for vertical video"
        segment = _segment(text, start=0.0, duration=2.0)
        chunk, = build_chunks(segment, FallbackSplit((text,)), PRESET_SOCIAL)

        assert chunk.line_count == 2
        assert all(len(line) <= 25 for line in chunk.lines)

    def test_empty_text(self):
        segment = _segment("", start=0.0, duration=1.0)
        assert build_chunks(segment, FallbackSplit(())) == ()


class TestReadingDifficulty:

    def _chunks(self):
        segment = _segment(_words(6), start=0.0, duration=3.0)
        return build_chunks(segment, FallbackSplit((_words(6),)))

    def test_easy(self):
        # 6 words over 3s = 120 WPM
        assert reading_difficulty(self._chunks(), 160) == DIFFICULTY_EASY

    def test_medium(self):
        assert reading_difficulty(self._chunks(), 130) == DIFFICULTY_MEDIUM

    def test_hard(self):
        assert reading_difficulty(self._chunks(), 90) == DIFFICULTY_HARD

    def test_no_chunks(self):
        assert reading_difficulty((), 160) == DIFFICULTY_EASY


class TestChunkSegment:

    def test_drift_reported_when_clamped(self):
        segment = _segment(_words(13), start=0.0, duration=6.5)
        chunked = asyncio.run(chunk_segment(segment, 160))

        assert chunked.total_chunks == 3
        assert chunked.duration_drift == pytest.approx(25 / 30 - 0.5)
        assert chunked.avg_chunk_duration == pytest.approx((6.0 + 25 / 30) / 3)

    def test_no_drift_without_clamping(self):
        segment = _segment(_words(12), start=1.0, duration=6.0)
        chunked = asyncio.run(chunk_segment(segment, 160))
        assert chunked.duration_drift == pytest.approx(0.0, abs=TOLERANCE)

    def test_semantic_splitter(self):
        segment = _segment("one two three four five", start=0.0, duration=2.0)
        splitter = PhraseSplitter(["one two three", "four five"])
        chunked = asyncio.run(chunk_segment(segment, 160, splitter=splitter))

        assert [c.text for c in chunked.caption_chunks] == ["one two three", "four five"]
        assert all(c.confidence == 0.95 for c in chunked.caption_chunks)
        assert chunked.original_text == "one two three four five"


class TestCreateCaptions:

    def test_narration(self, narration_segments, narration_words):
        alignment = align(narration_segments, narration_words, frame_rate=30)
        batch = asyncio.run(create_captions(alignment))

        assert [s.segment_id for s in batch.segments] == ["s1", "s3"]
        assert batch.total_chunks == 2
        assert batch.avg_words_per_chunk == pytest.approx(4.5)
        assert batch.avg_chars_per_chunk == pytest.approx(23.5)
        assert batch.estimated_reading_speed == 160
        assert batch.quality_score == 100

        s1, s3 = batch.segments
        assert s1.caption_chunks[0].start_time == pytest.approx(0.0)
        assert s1.caption_chunks[0].end_time == pytest.approx(1.0)
        assert s3.caption_chunks[0].start_time == pytest.approx(1.5)
        assert s3.caption_chunks[0].end_time == pytest.approx(3.1)
        assert s1.reading_difficulty == DIFFICULTY_HARD
        assert s3.reading_difficulty == DIFFICULTY_MEDIUM

    def test_content_type_sets_reading_speed(self, narration_segments, narration_words):
        alignment = align(narration_segments, narration_words)
        batch = asyncio.run(create_captions(alignment, content_type="educational"))
        assert batch.estimated_reading_speed == 130

    def test_unknown_content_type(self, narration_segments, narration_words):
        alignment = align(narration_segments, narration_words)
        with pytest.raises(ValueError, match="Unknown content type"):
            asyncio.run(create_captions(alignment, content_type="leisurely"))

    def test_failed_alignment_gives_empty_batch(self, narration_segments):
        alignment = align(narration_segments, [])
        batch = asyncio.run(create_captions(alignment))

        assert batch.segments == ()
        assert batch.total_chunks == 0
        assert batch.avg_words_per_chunk == 0.0
        assert batch.quality_score == 100
