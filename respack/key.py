"""
Namespaced resource identifiers.

A key is a ``namespace:value`` pair such as ``minecraft:block/stone``.
Keys are immutable, hashable and ordered by (namespace, value).
"""

import re
from dataclasses import dataclass
from typing import Optional

from respack.errors import InvalidKeyError

MINECRAFT_NAMESPACE = "minecraft"

_NAMESPACE_PATTERN = re.compile(r"^[a-z0-9_.\-]+$")
_VALUE_PATTERN = re.compile(r"^[a-z0-9_.\-/]+$")
_RELATIVE_SEGMENTS = ("", ".", "..")


def is_valid_namespace(namespace: str) -> bool:
    return bool(_NAMESPACE_PATTERN.match(namespace)) and namespace not in _RELATIVE_SEGMENTS


def is_valid_value(value: str) -> bool:
    """Check value characters; every '/'-separated segment must name a file or directory."""
    if not _VALUE_PATTERN.match(value):
        return False
    return not any(segment in _RELATIVE_SEGMENTS for segment in value.split("/"))


@dataclass(frozen=True, order=True)
class Key:
    """Namespaced identifier of a resource."""
    namespace: str
    value: str

    def __post_init__(self):
        if not isinstance(self.namespace, str) or not is_valid_namespace(self.namespace):
            raise InvalidKeyError(f"Invalid key namespace: {self.namespace!r}")
        if not isinstance(self.value, str) or not is_valid_value(self.value):
            raise InvalidKeyError(f"Invalid key value: {self.value!r}")

    @classmethod
    def of(cls, namespace_or_string: str, value: Optional[str] = None) -> "Key":
        """
        Create a key from ``"namespace:value"`` or from its two parts.

        A string without a colon uses the ``minecraft`` namespace.

        Example:
            >>> Key.of("block/stone")
            Key(namespace='minecraft', value='block/stone')
            >>> Key.of("mypack", "item/ruby")
            Key(namespace='mypack', value='item/ruby')
        """
        if value is not None:
            return cls(namespace_or_string, value)
        namespace, sep, rest = namespace_or_string.partition(":")
        if not sep:
            return cls(MINECRAFT_NAMESPACE, namespace_or_string)
        return cls(namespace, rest)

    def as_string(self) -> str:
        return f"{self.namespace}:{self.value}"

    def __str__(self) -> str:
        return self.as_string()
