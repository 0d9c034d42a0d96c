"""JSON-ready export of alignment and caption results.

WHY: The persistence collaborator stores results keyed by video and
segment. It needs plain dicts, not dataclasses, and a guarantee that
what it stores has the expected shape.

HOW: Results are converted with dataclasses.asdict(), caption layouts are
flattened to a "lines" list plus "line_count", and the output is
validated with jsonschema against the schemas bundled in
script_sync/schemas before returning.

RULES:
- Schema validation is mandatory and raises on invalid output
- Tuples become lists; no other value is transformed
- Schemas are loaded once and cached
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any

import jsonschema

from script_sync.core.ir import AlignmentResult, CaptionBatch, CaptionChunk, ChunkedSegment

_SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"

_CACHED_SCHEMAS: dict[str, dict[str, Any]] = {}


def _get_schema(name: str) -> dict[str, Any]:
    """Load a bundled JSON schema, cached after the first call."""
    if name not in _CACHED_SCHEMAS:
        with open(_SCHEMA_DIR / f"{name}.schema.json", encoding="utf-8") as f:
            _CACHED_SCHEMAS[name] = json.load(f)
    return _CACHED_SCHEMAS[name]


def _lists(value: Any) -> Any:
    """Recursively turn tuples into lists (jsonschema arrays are lists)."""
    if isinstance(value, dict):
        return {k: _lists(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_lists(v) for v in value]
    return value


def alignment_to_dict(result: AlignmentResult) -> dict[str, Any]:
    """Convert an AlignmentResult to a validated, JSON-ready dict.

    Raises:
        jsonschema.ValidationError: If the output violates the schema.
    """
    output = _lists(dataclasses.asdict(result))
    jsonschema.validate(instance=output, schema=_get_schema("alignment"))
    return output


def _chunk_to_dict(chunk: CaptionChunk) -> dict[str, Any]:
    return {
        "id": chunk.id,
        "text": chunk.text,
        "start_time": chunk.start_time,
        "end_time": chunk.end_time,
        "duration": chunk.duration,
        "word_count": chunk.word_count,
        "char_count": chunk.char_count,
        "line_count": chunk.line_count,
        "lines": list(chunk.lines),
        "confidence": chunk.confidence,
        "type": chunk.type,
    }


def _segment_to_dict(segment: ChunkedSegment) -> dict[str, Any]:
    return {
        "segment_id": segment.segment_id,
        "original_text": segment.original_text,
        "caption_chunks": [_chunk_to_dict(c) for c in segment.caption_chunks],
        "total_chunks": segment.total_chunks,
        "avg_chunk_duration": segment.avg_chunk_duration,
        "reading_difficulty": segment.reading_difficulty,
        "duration_drift": segment.duration_drift,
    }


def captions_to_dict(batch: CaptionBatch) -> dict[str, Any]:
    """Convert a CaptionBatch to a validated, JSON-ready dict.

    Raises:
        jsonschema.ValidationError: If the output violates the schema.
    """
    output = {
        "segments": [_segment_to_dict(s) for s in batch.segments],
        "total_chunks": batch.total_chunks,
        "avg_words_per_chunk": batch.avg_words_per_chunk,
        "avg_chars_per_chunk": batch.avg_chars_per_chunk,
        "estimated_reading_speed": batch.estimated_reading_speed,
        "quality_score": batch.quality_score,
    }
    jsonschema.validate(instance=output, schema=_get_schema("captions"))
    return output
