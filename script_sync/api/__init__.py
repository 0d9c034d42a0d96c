"""Collaborator boundary: recognizer payloads and the semantic splitter.

WHY: The engine consumes a speech recognizer's word-timestamped output
and, optionally, a language model that breaks text into phrases. Both are
external services whose wire formats should not leak into the core.

HOW: models.py holds pydantic models for the recognizer payload and the
chat completion response. splitter.py wraps an OpenAI-compatible chat
endpoint behind httpx.AsyncClient as a phrase splitter.

RULES:
- All splitter HTTP calls go through ChatPhraseSplitter
- Payload parsing converts to core IR types at this boundary
"""

from script_sync.api.models import RecognizerPayload, parse_recognizer_payload
from script_sync.api.splitter import ChatPhraseSplitter, SplitterAPIError

__all__ = [
    "ChatPhraseSplitter",
    "RecognizerPayload",
    "SplitterAPIError",
    "parse_recognizer_payload",
]
