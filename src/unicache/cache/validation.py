"""
unicache — Key and Value Validation

Pure checks applied by every adapter operation before the transport is
touched. The same rules hold for every engine.
"""

import json
import math
import re
from typing import Any

MAX_KEY_BYTES = 250
MAX_VALUE_BYTES = 1024 * 1024

# Whitespace and control characters (memcached rejects both)
_FORBIDDEN_KEY_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")

SCALAR_TYPES = (str, int, float, bool)
OBJECT_TYPES = (dict, list)


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _serialized_length(value: Any) -> int | None:
    """UTF-8 length of the serialized value, or None if it cannot be serialized."""
    if isinstance(value, str):
        return _byte_length(value)
    try:
        return _byte_length(json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False))
    except (TypeError, ValueError, RecursionError):
        return None


def is_scalar(value: Any) -> bool:
    """True for str, int, float and bool values."""
    return isinstance(value, SCALAR_TYPES)


def is_object(value: Any) -> bool:
    """True for structured (dict or list) values."""
    return isinstance(value, OBJECT_TYPES)


def is_valid_key(key: Any) -> bool:
    """
    Check that a cache key is well formed.

    A valid key is a non-empty string with no whitespace or control
    characters whose UTF-8 encoding is at most 250 bytes.
    """
    if not isinstance(key, str) or key == "":
        return False
    if _FORBIDDEN_KEY_CHARS.search(key):
        return False
    return _byte_length(key) <= MAX_KEY_BYTES


def is_valid_scalar_value(value: Any) -> bool:
    """
    Check that a value can be stored with ``set``.

    Structured values are rejected; they must go through ``set_object``.
    """
    if value is None or not is_scalar(value):
        return False
    if isinstance(value, float) and not math.isfinite(value):
        return False
    size = _serialized_length(value)
    return size is not None and size <= MAX_VALUE_BYTES


def _is_json_tree(value: Any) -> bool:
    """
    True if value reads back unchanged after a JSON round trip.

    Containers must be dicts with string keys or lists (tuples would come
    back as lists, int keys as strings); leaves must be None or finite
    scalars.
    """
    stack = [value]
    seen: set[int] = set()
    while stack:
        node = stack.pop()
        if isinstance(node, (dict, list)):
            # Revisited containers are skipped; cycles fail at serialization
            if id(node) in seen:
                continue
            seen.add(id(node))
        if isinstance(node, dict):
            if not all(isinstance(field, str) for field in node):
                return False
            stack.extend(node.values())
        elif isinstance(node, list):
            stack.extend(node)
        elif node is not None and not is_scalar(node):
            return False
        elif isinstance(node, float) and not math.isfinite(node):
            return False
    return True


def is_valid_object_value(value: Any) -> bool:
    """
    Check that a value can be stored with ``set_object``.

    Accepts dicts and lists made of JSON types at every depth, up to 1 MiB
    once serialized.
    """
    if not is_object(value) or not _is_json_tree(value):
        return False
    size = _serialized_length(value)
    return size is not None and size <= MAX_VALUE_BYTES


def is_valid_amount(value: Any) -> bool:
    """Increment/decrement amounts are positive integers."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_valid_lifetime(value: Any) -> bool:
    """Touch lifetimes are positive integer seconds."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
