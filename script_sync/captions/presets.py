"""Caption standards and reading-speed bands.

WHY: Broadcast and social outputs need different limits for line length,
caption duration, reading speed. Hoisting every threshold into one value
object lets callers pick a standard per locale or channel without code
changes, and lets concurrent runs use different standards safely.

HOW: CaptionStandard is a frozen dataclass. PRESETS maps names to
instances; custom standards are derived with dataclasses.replace().
Content types ("educational", "standard", "fast") select one of the
standard's reading-speed bands.

RULES:
- Presets are frozen; derive, never mutate
- The broadcast numbers follow common broadcast/streaming guides:
  42 chars/line, 2 lines, 0.833s (20 frames @24fps) to 7s per caption
- min_gap is advisory; composition enforces it, the chunker does not
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

CONTENT_EDUCATIONAL = "educational"
CONTENT_STANDARD = "standard"
CONTENT_FAST = "fast"


@dataclass(frozen=True)
class CaptionStandard:
    """Readability limits for one caption target."""

    max_chars_per_line: int = 42
    ideal_chars_per_line: int = 37
    max_lines: int = 2

    min_duration: float = 0.833
    max_duration: float = 7.0
    ideal_duration: float = 3.0
    min_gap: float = 0.083

    educational_wpm: int = 130
    standard_wpm: int = 160
    max_wpm: int = 180

    fallback_window_words: int = 6

    def __post_init__(self) -> None:
        if self.max_chars_per_line <= 0:
            raise ValueError("max_chars_per_line must be positive")
        if not 0 < self.min_duration < self.max_duration:
            raise ValueError("Caption durations must satisfy 0 < min_duration < max_duration")
        if self.fallback_window_words <= 0:
            raise ValueError("fallback_window_words must be positive")

    @property
    def max_chars_per_caption(self) -> int:
        return self.max_chars_per_line * self.max_lines


# Broadcast format: 16:9, traditional TV and streaming subtitles
PRESET_BROADCAST = CaptionStandard()

# Social media format: 9:16 vertical video, short lines and quick cues
PRESET_SOCIAL = CaptionStandard(
    max_chars_per_line=25,
    ideal_chars_per_line=18,
    min_duration=0.6,
    max_duration=3.5,
    ideal_duration=2.0,
    fallback_window_words=4,
)

PRESETS: Dict[str, CaptionStandard] = {
    "broadcast": PRESET_BROADCAST,
    "social": PRESET_SOCIAL,
    "some": PRESET_SOCIAL,  # Alias
}


def get_standard(name: str) -> CaptionStandard:
    """Look up a caption standard by preset name.

    Raises:
        ValueError: If the preset name is not recognized.
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            "Unknown preset '{}'. Available: {}".format(name, ", ".join(PRESETS))
        ) from None


def reading_speed(content_type: str, standard: CaptionStandard = PRESET_BROADCAST) -> int:
    """Target reading speed (WPM) for a content type.

    Raises:
        ValueError: If the content type is not recognized.
    """
    bands = {
        CONTENT_EDUCATIONAL: standard.educational_wpm,
        CONTENT_STANDARD: standard.standard_wpm,
        CONTENT_FAST: standard.max_wpm,
    }
    if content_type not in bands:
        raise ValueError(
            "Unknown content type '{}'. Available: {}".format(content_type, ", ".join(bands))
        )
    return bands[content_type]
