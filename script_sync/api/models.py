"""Pydantic models for collaborator payloads.

WHY: Recognizer and chat responses arrive as loosely-typed JSON. Typed
models validate field types at runtime, catch malformed payloads early,
and give one place to absorb field-name differences between providers.

HOW: RecognizerPayload mirrors a Whisper-style verbose JSON transcript
(words with start/end, optional duration). Word text is read from
"word" or "text"; confidence from "confidence" or "probability". The
chat models cover only the fields the splitter reads.

RULES:
- Word confidence defaults to 0.9 when the recognizer omits it
- Words with blank text are dropped
- An end before its start is clamped to the start
- pydantic evaluates field annotations at runtime, so model fields use
  Optional from typing to stay Python 3.9 compatible
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from script_sync.core.ir import DEFAULT_RECOGNIZER_CONFIDENCE, RecognizedWord


# ---------------------------------------------------------------------------
# Recognizer payload
# ---------------------------------------------------------------------------


class RecognizerWordPayload(BaseModel):
    """One timestamped word in a recognizer response."""

    model_config = ConfigDict(extra="ignore")

    word: str = Field(validation_alias=AliasChoices("word", "text"))
    start: float = Field(ge=0)
    end: float = Field(ge=0)
    confidence: Optional[float] = Field(
        default=None,
        ge=0,
        le=1,
        validation_alias=AliasChoices("confidence", "probability"),
    )


class RecognizerPayload(BaseModel):
    """A verbose recognizer transcript with word-level timestamps."""

    model_config = ConfigDict(extra="ignore")

    words: List[RecognizerWordPayload] = Field(default_factory=list)
    duration: Optional[float] = Field(default=None, ge=0)
    language: Optional[str] = None
    text: Optional[str] = None

    def recognized_words(self) -> List[RecognizedWord]:
        """Convert payload words into core RecognizedWord records."""
        result: List[RecognizedWord] = []
        for w in self.words:
            text = w.word.strip()
            if not text:
                continue
            result.append(RecognizedWord(
                text=text,
                start=w.start,
                end=max(w.start, w.end),
                confidence=(
                    w.confidence if w.confidence is not None
                    else DEFAULT_RECOGNIZER_CONFIDENCE
                ),
            ))
        return result

    @property
    def total_duration(self) -> float:
        """Reported audio duration, or the end of the last word."""
        if self.duration is not None:
            return self.duration
        return max((w.end for w in self.words), default=0.0)


def parse_recognizer_payload(data: Dict[str, Any]) -> RecognizerPayload:
    """Validate a raw recognizer response dict.

    Raises:
        pydantic.ValidationError: If the payload is malformed.
    """
    return RecognizerPayload.model_validate(data)


# ---------------------------------------------------------------------------
# Chat completion response (only what the splitter reads)
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: Optional[str] = None
    content: Optional[str] = None


class ChatChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: ChatMessage


class ChatCompletion(BaseModel):
    model_config = ConfigDict(extra="ignore")

    choices: List[ChatChoice] = Field(default_factory=list)
