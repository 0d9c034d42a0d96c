"""Tests for boundary-preserving realignment.

WHY: Realignment runs after an editor has pinned segment boundaries. If
it ever moved a boundary the editor's timeline would silently shift.

RULES:
- Boundaries must come back exactly as given (==, not approx)
"""

import pytest

from script_sync.core.ir import RecognizedWord, ScriptSegment
from script_sync.core.realigner import realign, realign_segment


@pytest.fixture
def words():
    return [
        RecognizedWord(text="hello", start=0.0, end=0.5),
        RecognizedWord(text="world", start=0.5, end=1.0),
        RecognizedWord(text="good",  start=5.0, end=5.4),
        RecognizedWord(text="night", start=5.4, end=5.9),
    ]


class TestRealign:

    def test_boundaries_unchanged(self, words):
        segment = ScriptSegment(
            id="a", text="hello world", start_time=0.0, end_time=1.2, duration=1.2
        )
        result = realign_segment(segment, words)

        assert result.start_time == 0.0
        assert result.end_time == 1.2
        assert result.duration == 1.2
        assert [t.word for t in result.word_timings] == ["hello", "world"]

    def test_cursor_starts_at_pinned_start(self, words):
        segment = ScriptSegment(
            id="b", text="good night", start_time=5.0, end_time=6.0, duration=1.0
        )
        result = realign_segment(segment, words)

        assert [t.start for t in result.word_timings] == pytest.approx([5.0, 5.4])
        assert result.end_time == 6.0

    def test_frame_fields_snapped(self):
        words = [RecognizedWord(text="hello", start=2.01, end=2.49)]
        segment = ScriptSegment(id="f", text="hello", start_time=2.0, end_time=3.0, duration=1.0)
        timing, = realign_segment(segment, words, frame_rate=25).word_timings

        assert timing.start == pytest.approx(2.01)
        assert timing.frame_start == pytest.approx(2.0)
        assert timing.frame_end == pytest.approx(2.48)
        assert timing.phonetic_match_score == pytest.approx(1.0)

    def test_unmatched_words_omitted(self, words):
        segment = ScriptSegment(id="c", text="zzzz", start_time=2.0, end_time=3.0, duration=1.0)
        result = realign_segment(segment, words)

        assert result.word_timings == ()
        assert result.start_time == 2.0

    def test_segment_without_start(self, words):
        result = realign_segment(ScriptSegment(id="d", text="world"), words)
        assert result.start_time is None
        assert result.word_timings[0].start == pytest.approx(0.5)

    def test_empty_recognizer(self):
        segment = ScriptSegment(id="e", text="hello", start_time=1.0, end_time=2.0, duration=1.0)
        result, = realign([segment], [])
        assert result.word_timings == ()
        assert result.end_time == 2.0

    def test_order_preserved(self, words):
        segments = [
            ScriptSegment(id="x", text="good", start_time=5.0, end_time=5.5, duration=0.5),
            ScriptSegment(id="y", text="hello", start_time=0.0, end_time=0.5, duration=0.5),
        ]
        assert [r.id for r in realign(segments, words)] == ["x", "y"]

    def test_rejects_bad_frame_rate(self, words):
        with pytest.raises(ValueError):
            realign([], words, frame_rate=0)
