"""Caption segmentation: presets, phrase splitting, chunking, scoring.

WHY: Aligned narration text has to be re-cut into captions that viewers
can actually read: bounded duration, bounded line length, at most two
lines, and breaks that fall on natural linguistic boundaries.

HOW: presets.py holds the CaptionStandard value object, phrases.py turns
segment text into candidate phrases (semantic collaborator or fixed
windows), chunker.py times and lays out the phrases, lines.py decides
line wraps, quality.py scores the result.

RULES:
- Every function takes its CaptionStandard explicitly; there is no global state
- Captioning never hard-fails because the semantic splitter is down
"""

from script_sync.captions.chunker import chunk_segment, create_captions
from script_sync.captions.lines import split_lines
from script_sync.captions.phrases import FallbackSplit, SemanticSplit, split_phrases
from script_sync.captions.presets import (
    PRESET_BROADCAST,
    PRESET_SOCIAL,
    PRESETS,
    CaptionStandard,
    get_standard,
    reading_speed,
)
from script_sync.captions.quality import score_captions

__all__ = [
    "CaptionStandard",
    "FallbackSplit",
    "PRESETS",
    "PRESET_BROADCAST",
    "PRESET_SOCIAL",
    "SemanticSplit",
    "chunk_segment",
    "create_captions",
    "get_standard",
    "reading_speed",
    "score_captions",
    "split_lines",
    "split_phrases",
]
