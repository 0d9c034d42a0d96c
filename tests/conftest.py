"""Shared test fixtures for the script_sync test suite.

WHY: Several test modules need the same small narration: a script with
a degenerate segment and a recognizer transcript with a respelled word.
Centralizing it keeps the expected numbers consistent across modules.

HOW: Pytest fixtures provide the recognizer words, the script segments,
and a tiny two-word transcript for exact-match scenarios.

RULES:
- The recognizer transcript is temporally ordered with end > start
- "colour" in the script is heard as "color." (phonetic match)
- Segment "s2" has empty text and must never produce timings
"""

from typing import List

import pytest

from script_sync.core.ir import RecognizedWord, ScriptSegment

NARRATION_WORDS: List[RecognizedWord] = [
    RecognizedWord(text="Welcome", start=0.0, end=0.4, confidence=0.98),
    RecognizedWord(text="to",      start=0.4, end=0.5, confidence=0.97),
    RecognizedWord(text="the",     start=0.5, end=0.6, confidence=0.96),
    RecognizedWord(text="show.",   start=0.6, end=1.0, confidence=0.95),
    RecognizedWord(text="Today",   start=1.5, end=1.9, confidence=0.93),
    RecognizedWord(text="we",      start=1.9, end=2.0, confidence=0.94),
    RecognizedWord(text="talk",    start=2.0, end=2.3, confidence=0.92),
    RecognizedWord(text="about",   start=2.3, end=2.6, confidence=0.95),
    RecognizedWord(text="color.",  start=2.6, end=3.1, confidence=0.90),
]

NARRATION_SEGMENTS: List[ScriptSegment] = [
    ScriptSegment(id="s1", text="Welcome to the show."),
    ScriptSegment(id="s2", text="   "),
    ScriptSegment(id="s3", text="Today we talk about colour."),
]


@pytest.fixture
def narration_words():
    """Recognizer transcript for the sample narration."""
    return list(NARRATION_WORDS)


@pytest.fixture
def narration_segments():
    """Script segments for the sample narration (s2 is degenerate)."""
    return list(NARRATION_SEGMENTS)


@pytest.fixture
def hello_world_words():
    """Two exact-match recognizer words at 0.95 confidence."""
    return [
        RecognizedWord(text="hello", start=0.0, end=0.5, confidence=0.95),
        RecognizedWord(text="world", start=0.5, end=1.0, confidence=0.95),
    ]
