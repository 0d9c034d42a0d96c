"""Tests for caption line splitting.

WHY: Line breaks are the most visible part of caption layout. Viewers
notice a dangling "and" or a lopsided pair of lines immediately.

HOW: Hand-measured sentences whose scores for every candidate break
were worked out by hand, so each test pins one rule.

RULES:
- No line may exceed the limit unless it is a single unbreakable word
- Lines re-joined with a space must equal the normalised input
"""

import pytest

from script_sync.captions.lines import split_lines
from script_sync.core.ir import OneLine, TwoLines


class TestSplitLines:

    def test_short_text_single_line(self):
        layout = split_lines("Short caption text here", 42)
        assert layout == OneLine("Short caption text here")
        assert layout.lines == ("Short caption text here",)

    def test_long_text_two_balanced_lines(self):
        text = "The quick brown fox jumps over the lazy sleeping dog"
        layout = split_lines(text, 42)

        assert layout == TwoLines("The quick brown fox jumps", "over the lazy sleeping dog")
        assert all(len(line) <= 42 for line in layout.lines)
        assert " ".join(layout.lines) == text

    def test_prefers_break_after_comma(self):
        layout = split_lines("When the storm came near, we ran back into the red barn", 42)
        assert layout == TwoLines("When the storm came near,", "we ran back into the red barn")

    def test_top_line_shortened_when_it_still_fits(self):
        text = "We went to the market yesterday, and then we all came back home"
        layout = split_lines(text, 42)

        assert layout == TwoLines(
            "We went to the market", "yesterday, and then we all came back home"
        )

    def test_two_long_words(self):
        layout = split_lines("a" * 30 + " " + "b" * 30, 42)
        assert layout == TwoLines("a" * 30, "b" * 30)

    def test_single_unbreakable_word(self):
        word = "x" * 50
        assert split_lines(word, 42) == OneLine(word)

    def test_whitespace_normalised(self):
        assert split_lines("  two \n words ", 42) == OneLine("two words")

    @pytest.mark.parametrize("limit", [0, -1])
    def test_rejects_bad_limit(self, limit):
        with pytest.raises(ValueError):
            split_lines("text", limit)

    def test_never_empty_line(self):
        for n in range(2, 20):
            text = " ".join(["word"] * n)
            for line in split_lines(text, 12).lines:
                assert line
