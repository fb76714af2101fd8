"""
Error types raised while building, serializing and reading resource packs.

Every error carries a stable ``code`` so callers (and reports) can match on
it without parsing messages. All of them are ``ValueError`` subclasses.
"""

from typing import Any, Dict, List, Optional

E_INVALID_PATH = "E_INVALID_PATH"
E_INVALID_KEY = "E_INVALID_KEY"
E_MALFORMED_DATA = "E_MALFORMED_DATA"
E_TYPE_MISMATCH = "E_TYPE_MISMATCH"
E_PATH_COLLISION = "E_PATH_COLLISION"
E_DUPLICATE_RESOURCE = "E_DUPLICATE_RESOURCE"
E_METADATA_CONFLICT = "E_METADATA_CONFLICT"
E_RESOURCE_DECODE = "E_RESOURCE_DECODE"
E_RESOURCE_DECODE_BATCH = "E_RESOURCE_DECODE_BATCH"


class PackError(ValueError):
    """Base class for all respack errors."""

    code = "E_PACK"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class InvalidPathError(PackError):
    """A file path is empty, absolute, or escapes the pack root."""

    code = E_INVALID_PATH

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path '{path}': {reason}", {"path": path})
        self.path = path
        self.reason = reason


class InvalidKeyError(PackError):
    code = E_INVALID_KEY


class MalformedDataError(PackError):
    """Structured-data text could not be parsed or has the wrong shape."""

    code = E_MALFORMED_DATA


class TypeMismatchError(MalformedDataError):
    """A field is present but its value has an incompatible type."""

    code = E_TYPE_MISMATCH

    def __init__(self, key: str, expected: str, value: Any = None):
        super().__init__(
            f"Field '{key}' must be {expected}, got {type(value).__name__}",
            {"key": key, "expected": expected},
        )
        self.key = key
        self.expected = expected


class PathCollisionError(PackError):
    """Two distinct resources were serialized to the same path."""

    code = E_PATH_COLLISION

    def __init__(self, path: str, first: str, second: str):
        super().__init__(
            f"Path collision at '{path}': {first} and {second}",
            {"path": path, "first": first, "second": second},
        )
        self.path = path
        self.first = first
        self.second = second


class DuplicateResourceError(PackError):
    code = E_DUPLICATE_RESOURCE

    def __init__(self, kind: str, key: Any):
        super().__init__(f"Duplicate {kind}: {key}", {"kind": kind, "key": str(key)})
        self.kind = kind
        self.key = key


class MetadataConflictError(PackError):
    """Two metadata parts would be written under the same property name."""

    code = E_METADATA_CONFLICT

    def __init__(self, name: str, first: Any, second: Any):
        super().__init__(
            f"Metadata property '{name}' is written by both {first!r} and {second!r}",
            {"property": name},
        )
        self.name = name
        self.first = first
        self.second = second


class ResourceDecodeError(PackError):
    """A file matched a resource kind but could not be decoded as one."""

    code = E_RESOURCE_DECODE

    def __init__(self, path: str, cause: BaseException):
        super().__init__(
            f"Failed to decode '{path}': {cause}",
            {"path": path, "cause": type(cause).__name__},
        )
        self.path = path
        self.cause = cause


class ResourceDecodeErrors(PackError):
    """
    All decode failures of a lenient read.

    ``pack`` holds everything that did decode, so the caller can decide
    whether partial success is acceptable.
    """

    code = E_RESOURCE_DECODE_BATCH

    def __init__(self, errors: List[ResourceDecodeError], pack: Any = None):
        paths = ", ".join(e.path for e in errors)
        super().__init__(
            f"{len(errors)} file(s) failed to decode: {paths}",
            {"paths": [e.path for e in errors]},
        )
        self.errors = errors
        self.pack = pack


__all__ = [
    "PackError",
    "InvalidPathError",
    "InvalidKeyError",
    "MalformedDataError",
    "TypeMismatchError",
    "PathCollisionError",
    "DuplicateResourceError",
    "MetadataConflictError",
    "ResourceDecodeError",
    "ResourceDecodeErrors",
    "E_INVALID_PATH",
    "E_INVALID_KEY",
    "E_MALFORMED_DATA",
    "E_TYPE_MISMATCH",
    "E_PATH_COLLISION",
    "E_DUPLICATE_RESOURCE",
    "E_METADATA_CONFLICT",
    "E_RESOURCE_DECODE",
    "E_RESOURCE_DECODE_BATCH",
]
