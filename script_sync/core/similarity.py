"""Orthographic and phonetic word similarity.

WHY: Recognizers mishear, respell, and re-number words ("colour" vs
"color", "its" vs "it's"). Matching script words against recognizer words
needs a score that tolerates both spelling drift and sound-alike errors.

HOW: Two independent scores, combined by taking the maximum:
  text_similarity:     exact (1.0), substring (0.9), else normalised
                       Levenshtein similarity
  phonetic_similarity: compare 4-character Soundex-like codes; identical
                       codes score 0.85, otherwise the position-wise
                       match ratio

RULES:
- All functions are pure and deterministic
- Every score is within [0, 1]
- A phonetic match is never treated as certain (capped at 0.85)
"""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

_PUNCT_RE = re.compile(r"[^\w\s]")
_NON_ALPHA_RE = re.compile(r"[^a-z]")

PHONETIC_MATCH_SCORE = 0.85
SUBSTRING_MATCH_SCORE = 0.9
PHONETIC_CODE_LENGTH = 4

# Consonant classes: labials, gutturals/sibilants, dentals, liquid, nasals, rhotic.
# Vowels and letters not listed here are dropped from the code.
_PHONETIC_CLASSES = {
    "b": "1", "f": "1", "p": "1", "v": "1",
    "c": "2", "g": "2", "j": "2", "k": "2", "q": "2", "s": "2", "x": "2", "z": "2",
    "d": "3", "t": "3",
    "l": "4",
    "m": "5", "n": "5",
    "r": "6",
}


def normalize_word(word: str) -> str:
    """Lowercase a word and strip punctuation."""
    return _PUNCT_RE.sub("", word.lower()).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    return Levenshtein.distance(a, b)


def text_similarity(a: str, b: str) -> float:
    """Orthographic similarity of two words in [0, 1].

    RULES:
    - Words are normalised (lowercase, punctuation stripped) first
    - Exact match → 1.0, including empty vs empty
    - One side empty → 0.0 (an empty string is not a meaningful substring)
    - Substring containment in either direction → 0.9
    - Otherwise 1 - distance / max(len(a), len(b))
    """
    na, nb = normalize_word(a), normalize_word(b)
    if na == nb:
        return 1.0
    if not na or not nb:
        return 0.0
    if na in nb or nb in na:
        return SUBSTRING_MATCH_SCORE
    longest = max(len(na), len(nb))
    return 1.0 - levenshtein_distance(na, nb) / longest


def phonetic_code(word: str) -> str:
    """Reduce a word to a 4-character Soundex-like code.

    The first letter is kept literally; later letters map to their
    consonant class, vowels and unmapped letters are dropped, and a class
    repeating the previous code character is collapsed. The result is
    padded with "0" or truncated to 4 characters. Words without letters
    produce an empty code.
    """
    letters = _NON_ALPHA_RE.sub("", word.lower())
    if not letters:
        return ""

    code = letters[0]
    for ch in letters[1:]:
        cls = _PHONETIC_CLASSES.get(ch)
        if cls is None:
            continue
        if cls != code[-1]:
            code += cls

    return code[:PHONETIC_CODE_LENGTH].ljust(PHONETIC_CODE_LENGTH, "0")


def phonetic_similarity(a: str, b: str) -> float:
    """Sound-alike similarity of two words in [0, 0.85]."""
    code_a, code_b = phonetic_code(a), phonetic_code(b)
    if not code_a or not code_b:
        return 0.0
    if code_a == code_b:
        return PHONETIC_MATCH_SCORE

    matches = sum(1 for x, y in zip(code_a, code_b) if x == y)
    return matches / max(len(code_a), len(code_b))


def combined_score(a: str, b: str) -> float:
    """The better of the orthographic and phonetic scores."""
    return max(text_similarity(a, b), phonetic_similarity(a, b))
