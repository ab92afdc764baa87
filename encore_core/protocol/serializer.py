"""Encore Serializer - Value Serialization.

Copyright (c) 2024-2026 Encore Choir Web Team. All rights reserved.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


def canonical_json(value: Any) -> str:
    """Serialize to a stable JSON string.

    Keys are sorted and separators are compact so structurally equal
    values always produce the same text.
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


class Serializer(ABC):
    """Abstract serializer for cache values.

    Values travel to Redis as text, so implementations produce ``str``.
    """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Get format name."""
        pass

    @abstractmethod
    def serialize(self, value: Any) -> str:
        """Serialize value to text.

        Args:
            value: Value to serialize

        Returns:
            Serialized text
        """
        pass

    @abstractmethod
    def deserialize(self, data: str) -> Any:
        """Deserialize text to value.

        Args:
            data: Serialized text

        Returns:
            Deserialized value
        """
        pass


class JSONSerializer(Serializer):
    """JSON serializer.

    Limited to JSON-compatible types; anything else raises ``TypeError``.
    Tuples come back as lists.
    """

    @property
    def format_name(self) -> str:
        return "json"

    def serialize(self, value: Any) -> str:
        return json.dumps(value)

    def deserialize(self, data: str) -> Any:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)


__all__ = [
    "Serializer",
    "JSONSerializer",
    "canonical_json",
]
