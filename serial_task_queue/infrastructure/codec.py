"""
JSON implementation of the canonical item encoding.
"""

import json
from typing import Any

from serial_task_queue.domain.codec import ItemCodec


def _reject_non_string_keys(value: Any) -> None:
    """Raise TypeError for mapping keys JSON would silently turn into strings."""
    if isinstance(value, dict):
        for key, child in value.items():
            if not isinstance(key, str):
                raise TypeError(f"keys must be str, not {type(key).__name__} ({key!r})")
            _reject_non_string_keys(child)
    elif isinstance(value, (list, tuple)):
        for child in value:
            _reject_non_string_keys(child)


class JsonItemCodec(ItemCodec):
    """
    Encodes items as JSON text.

    Mappings keep their insertion order. Cyclic references, values JSON has
    no representation for (sets, functions, arbitrary objects), mapping keys
    that are not strings and non-finite floats are rejected at encode time.
    """

    def encode(self, item: Any) -> str:
        encoded = json.dumps(item, allow_nan=False, check_circular=True)
        # Only reached for acyclic items, so the walk terminates
        _reject_non_string_keys(item)
        return encoded

    def decode(self, encoded: str) -> Any:
        return json.loads(encoded)
