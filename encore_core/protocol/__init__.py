"""Protocol module - Serialization and codecs."""

from encore_core.protocol.serializer import (
    Serializer,
    JSONSerializer,
    canonical_json,
)

__all__ = [
    "Serializer",
    "JSONSerializer",
    "canonical_json",
]
