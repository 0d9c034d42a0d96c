"""Phrase splitting: semantic collaborator with deterministic fallback.

WHY: The best caption boundaries follow meaning ("a complete thought in
4-8 words"), which a language model judges far better than a word
counter. But captioning must never fail because that helper is down, so
a deterministic splitter is always ready to take over.

HOW: split_phrases() asks the splitter collaborator for phrases. Any
exception, or an empty answer, falls back to fixed windows of N words.
The outcome is a two-variant result: SemanticSplit or FallbackSplit. The
variant, not a flag, determines chunk confidence (0.95 vs 0.8).

RULES:
- Splitter errors are logged and swallowed, never propagated
- Fixed windows keep word order, never overlap, last window may be short
- Blank phrases from the collaborator are discarded
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_WORDS = 6


@dataclass(frozen=True)
class SemanticSplit:
    """Phrases produced by the semantic splitter collaborator."""

    phrases: Tuple[str, ...]
    confidence: ClassVar[float] = 0.95


@dataclass(frozen=True)
class FallbackSplit:
    """Phrases produced by the fixed-window fallback."""

    phrases: Tuple[str, ...]
    confidence: ClassVar[float] = 0.8


PhraseSplit = Union[SemanticSplit, FallbackSplit]


class BasePhraseSplitter(ABC):
    """Abstract base for semantic phrase splitters.

    Any object with an async ``split(text) -> list[str]`` method works as
    a splitter; subclassing is a convenience, not a requirement.
    """

    @abstractmethod
    async def split(self, text: str) -> List[str]:
        """Break text into ordered, non-empty caption phrases."""


def fixed_windows(text: str, window: int = DEFAULT_WINDOW_WORDS) -> Tuple[str, ...]:
    """Split text into consecutive windows of `window` words."""
    if window <= 0:
        raise ValueError("window must be positive, got {!r}".format(window))
    words = text.split()
    return tuple(
        " ".join(words[i:i + window]) for i in range(0, len(words), window)
    )


async def split_phrases(
    text: str,
    splitter: Optional[Any] = None,
    window: int = DEFAULT_WINDOW_WORDS,
) -> PhraseSplit:
    """Split segment text into caption phrases.

    Args:
        text: Normalised segment text.
        splitter: Semantic splitter collaborator, or None to go straight
                  to the fixed-window fallback.
        window: Words per window for the fallback.

    Returns:
        SemanticSplit when the collaborator produced phrases, otherwise
        FallbackSplit.
    """
    if splitter is not None:
        try:
            raw = await splitter.split(text)
        except Exception as exc:
            logger.warning("Semantic splitter failed, using %d-word windows: %s", window, exc)
        else:
            phrases = tuple(" ".join(p.split()) for p in raw or () if p and p.strip())
            if phrases:
                return SemanticSplit(phrases)
            logger.warning("Semantic splitter returned no phrases, using %d-word windows", window)

    return FallbackSplit(fixed_windows(text, window))
