"""Semantic phrase splitter backed by an OpenAI-compatible chat endpoint.

WHY: Breaking narration into meaningful caption phrases is a judgement
call a language model makes well. This client asks one for phrases and
hands back plain strings; the chunker decides what to do on failure.

HOW: Wraps httpx.AsyncClient with Bearer auth. Use as an async context
manager to ensure the connection pool is closed. split() sends one
chat completion request per segment and returns the non-empty lines of
the reply.

RULES:
- Use as: async with ChatPhraseSplitter() as splitter: ...
- api_key defaults to load_api_key() from .env
- base_url/model default to SPLITTER_BASE_URL/SPLITTER_MODEL from config
- Non-2xx responses raise SplitterAPIError; no retries here
- temperature 0.3, max_tokens 500
"""

from __future__ import annotations

from typing import List, Optional

import httpx

from script_sync.api.models import ChatCompletion
from script_sync.captions.phrases import BasePhraseSplitter
from script_sync.config import SPLITTER_BASE_URL, SPLITTER_MODEL, load_api_key

_TEMPERATURE = 0.3
_MAX_TOKENS = 500

_PROMPT_TEMPLATE = """Break this text into caption chunks for video subtitles. Each chunk should:
- Be a complete thought or meaningful phrase (4-8 words ideal)
- Break at natural linguistic boundaries
- Never end mid-thought or with articles/prepositions
- Be easy to read at a glance

Text: "{text}"

Return ONLY the chunks, one per line, no numbering or formatting."""


class SplitterAPIError(Exception):
    """Raised when the chat endpoint returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Splitter API error {status_code}: {message}")


def build_prompt(text: str) -> str:
    """The phrase-breaking instruction for one segment's text."""
    return _PROMPT_TEMPLATE.format(text=text)


class ChatPhraseSplitter(BasePhraseSplitter):
    """Async semantic splitter using a chat completions API.

    The transport argument exists so tests can substitute an
    httpx.MockTransport for the network.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or SPLITTER_BASE_URL).rstrip("/")
        self._model = model or SPLITTER_MODEL
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ChatPhraseSplitter:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=httpx.Timeout(60.0, connect=10.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "ChatPhraseSplitter must be used as an async context manager: "
                "async with ChatPhraseSplitter() as splitter: ..."
            )
        return self._client

    async def split(self, text: str) -> List[str]:
        """Ask the model to break text into caption phrases.

        Returns:
            The reply's non-empty, stripped lines in order; an empty list
            when the reply has no content.

        Raises:
            SplitterAPIError: On non-2xx responses.
            httpx.HTTPError: On transport failures.
        """
        client = self._ensure_client()
        body = {
            "model": self._model,
            "messages": [{"role": "user", "content": build_prompt(text)}],
            "temperature": _TEMPERATURE,
            "max_tokens": _MAX_TOKENS,
        }

        resp = await client.post("/chat/completions", json=body)
        if resp.status_code != 200:
            raise SplitterAPIError(resp.status_code, resp.text)

        completion = ChatCompletion.model_validate(resp.json())
        content: Optional[str] = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            return []
        return [line.strip() for line in content.split("\n") if line.strip()]
