"""Frame quantization: snap timestamps to video-frame boundaries.

WHY: Captions and lip-sync cues are rendered per frame. A timestamp that
falls between frames is drawn a frame early or late depending on the
renderer, so every emitted time is snapped to an exact frame boundary.

RULES:
- quantize(t) = round(t / (1 / frame_rate)) * (1 / frame_rate)
- Ties at half-frame boundaries round to the even frame (Python round)
- quantize is idempotent and monotonic for any positive frame rate
- A non-positive frame rate raises ValueError
"""

from __future__ import annotations


def frame_duration(frame_rate: float) -> float:
    """Length of one frame in seconds."""
    if frame_rate <= 0:
        raise ValueError("frame_rate must be positive, got {!r}".format(frame_rate))
    return 1.0 / frame_rate


def to_frame(timestamp: float, frame_rate: float) -> int:
    """Index of the frame boundary nearest to timestamp."""
    return round(timestamp / frame_duration(frame_rate))


def from_frame(frame: int, frame_rate: float) -> float:
    """Timestamp of a frame boundary, in the same form quantize() returns."""
    return frame * frame_duration(frame_rate)


def quantize(timestamp: float, frame_rate: float) -> float:
    """Snap a timestamp to the nearest frame boundary."""
    return from_frame(to_frame(timestamp, frame_rate), frame_rate)
