"""
Value types shared by every resource: float vectors and deferred byte sources.

Vectors store single-precision components. Values are narrowed to float32
when a vector is built, so a vector read back from JSON compares equal to
the one that was written.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Union

import numpy as np


def to_float32(value: float) -> float:
    """Narrow a number to float32 and widen it back to a Python float."""
    return float(np.float32(value))


@dataclass(frozen=True)
class Vector2Float:
    x: float
    y: float

    def __post_init__(self):
        object.__setattr__(self, "x", to_float32(self.x))
        object.__setattr__(self, "y", to_float32(self.y))

    def as_tuple(self):
        return (self.x, self.y)


@dataclass(frozen=True)
class Vector3Float:
    x: float
    y: float
    z: float

    def __post_init__(self):
        object.__setattr__(self, "x", to_float32(self.x))
        object.__setattr__(self, "y", to_float32(self.y))
        object.__setattr__(self, "z", to_float32(self.z))

    def as_tuple(self):
        return (self.x, self.y, self.z)


Vector3Float.ZERO = Vector3Float(0.0, 0.0, 0.0)
Vector3Float.ONE = Vector3Float(1.0, 1.0, 1.0)


class Writable:
    """
    A byte source that can be produced any number of times.

    Large payloads (textures, sounds) are kept as a recipe for their bytes
    rather than as a buffer, so building a file tree never copies them.
    Every call to :meth:`to_bytes` must return identical bytes.

    Example:
        >>> Writable.from_string("hello").to_bytes()
        b'hello'
        >>> Writable.from_path("textures/ruby.png")  # read on demand
    """

    def __init__(self, producer: Callable[[], bytes], description: str = "<supplier>"):
        self._producer = producer
        self._description = description

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray]) -> "Writable":
        data = bytes(data)
        return cls(lambda: data, f"<{len(data)} bytes>")

    @classmethod
    def from_string(cls, text: str, encoding: str = "utf-8") -> "Writable":
        data = text.encode(encoding)
        return cls(lambda: data, f"<{len(data)} bytes>")

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "Writable":
        path = Path(path)
        return cls(path.read_bytes, str(path))

    @classmethod
    def from_supplier(cls, fn: Callable[[], bytes]) -> "Writable":
        return cls(fn)

    @classmethod
    def coerce(cls, data: Union["Writable", bytes, bytearray, str]) -> "Writable":
        """Wrap raw bytes or text; pass Writables through."""
        if isinstance(data, Writable):
            return data
        if isinstance(data, str):
            return cls.from_string(data)
        if isinstance(data, (bytes, bytearray)):
            return cls.from_bytes(data)
        raise TypeError(f"Expected Writable, bytes or str, got {type(data).__name__}")

    def to_bytes(self) -> bytes:
        return bytes(self._producer())

    def to_string(self, encoding: str = "utf-8") -> str:
        return self.to_bytes().decode(encoding)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Writable):
            return NotImplemented
        return self is other or self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"Writable({self._description})"
