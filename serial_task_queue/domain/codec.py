"""
Domain interface for item codecs.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ItemCodec(Protocol):
    """Protocol defining the canonical value encoding of queue items."""

    def encode(self, item: Any) -> str:
        """Encode an item, raising if it cannot be represented."""
        ...

    def decode(self, encoded: str) -> Any:
        """Rebuild an independent copy of an encoded item."""
        ...
