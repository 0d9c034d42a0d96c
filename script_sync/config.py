"""Configuration constants and .env loading.

WHY: Frame rate, caption preset, reading speed, and the semantic splitter
endpoint differ between deployments. Keeping the defaults here, and
letting the environment override them, keeps them out of the algorithms.

HOW: python-dotenv loads the .env file on import. Defaults are plain
module-level constants read from os.environ. load_api_key() gives a
clear error when the splitter key is missing.

RULES:
- Only this module reads the environment; the public entry points take
  these constants as their defaults
- API keys are loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Alignment and caption defaults
# ---------------------------------------------------------------------------

DEFAULT_FRAME_RATE = float(os.getenv("SCRIPT_SYNC_FRAME_RATE", "30"))
DEFAULT_CAPTION_PRESET = os.getenv("SCRIPT_SYNC_CAPTION_PRESET", "broadcast")
DEFAULT_CONTENT_TYPE = os.getenv("SCRIPT_SYNC_CONTENT_TYPE", "standard")

# ---------------------------------------------------------------------------
# Semantic splitter (OpenAI-compatible chat endpoint)
# ---------------------------------------------------------------------------

SPLITTER_BASE_URL = os.getenv("SPLITTER_BASE_URL", "https://api.openai.com/v1")
SPLITTER_MODEL = os.getenv("SPLITTER_MODEL", "gpt-3.5-turbo")


def load_api_key() -> str:
    """Load the splitter API key from the environment.

    WHY: The semantic splitter needs a key for every chat call. Loading it
    from the environment (via .env) keeps it out of source code.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "Semantic splitter API key not configured. "
            "Add OPENAI_API_KEY to the .env file or the environment."
        )
    return key
