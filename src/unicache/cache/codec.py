"""
unicache — Value Codec

JSON encoding shared by the network adapters. Redis and Memcached only
hold strings, so every value crosses the transport as compact UTF-8 JSON.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def to_json(value: Any) -> str:
    """Serialize value to a compact JSON string."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def from_json(data: str | bytes | None) -> Any | None:
    """
    Deserialize a JSON string. Returns None if data is None.

    Data that is not valid JSON (written by another client, for example)
    is returned as a string.
    """
    if data is None:
        return None
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(
                f"Cached bytes are not valid UTF-8, returning None: {e}",
                extra={"error": str(e)},
            )
            return None
    try:
        return json.loads(data)
    except ValueError as e:
        logger.warning(
            f"Failed to decode JSON from cache, returning raw data: {e}",
            extra={"data_preview": data[:100], "error": str(e)},
        )
        return data
