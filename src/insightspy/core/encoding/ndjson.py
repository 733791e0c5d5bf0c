"""NDJSON encoder for telemetry envelopes."""

import json
from collections.abc import Iterable, Mapping
from typing import Any


def encode_ndjson(objects: Iterable[Mapping[str, Any]]) -> str:
    """Encode JSON objects to newline-delimited JSON.

    Args:
        objects: An iterable of JSON-serializable mappings.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no objects.
    """
    lines = [json.dumps(obj, separators=(",", ":")) for obj in objects]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
