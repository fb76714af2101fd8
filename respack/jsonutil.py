"""
JSON helpers shared by every resource codec.

Parsing is tolerant of the things older producers emit (a byte-order mark,
stray whitespace, ``"true"``/``"false"`` strings in boolean fields) but never
turns a malformed value into a default: only *absent* fields get defaults.
"""

import json
import math
from typing import Any, Dict, IO, List, Optional, Union

import numpy as np

from respack.base import Vector2Float, Vector3Float, to_float32
from respack.errors import MalformedDataError, TypeMismatchError

_BOM = "\ufeff"
_WHITESPACE = " \t\r\n"


def _reject_constant(name: str) -> Any:
    raise MalformedDataError(f"Invalid JSON number: {name}", {"token": name})


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def parse_string(text: Union[str, bytes]) -> Any:
    """
    Parse one JSON document.

    Args:
        text: JSON text (bytes are decoded as UTF-8)

    Returns:
        The parsed tree (dict, list, str, int, float, bool or None)

    Raises:
        MalformedDataError: If the text is not exactly one valid JSON document
            (NaN and Infinity are not JSON numbers)
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedDataError(f"Invalid UTF-8 in JSON data: {e}") from e
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    start = len(text) - len(text.lstrip(_WHITESPACE))
    if start == len(text):
        raise MalformedDataError("Empty JSON document")
    try:
        node, end = _DECODER.raw_decode(text, start)
    except json.JSONDecodeError as e:
        raise MalformedDataError(
            f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}",
            {"line": e.lineno, "column": e.colno},
        ) from e
    except RecursionError as e:
        raise MalformedDataError("JSON document is nested too deeply") from e

    if text[end:].strip(_WHITESPACE):
        raise MalformedDataError(
            f"Unexpected data after JSON document at offset {end}",
            {"offset": end},
        )
    return node


def parse_reader(stream: IO) -> Any:
    """Parse one JSON document from a text or binary stream."""
    return parse_string(stream.read())


def dumps(node: Any, indent: Optional[int] = 2) -> str:
    """Serialize a tree to JSON text (object key order is preserved)."""
    return json.dumps(node, indent=indent, ensure_ascii=False) + "\n"


def is_null_or_absent(obj: Dict[str, Any], key: str) -> bool:
    return obj.get(key) is None


def _is_number(value: Any) -> bool:
    # bool is an int subclass but is never a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_numeric(obj: Dict[str, Any], key: str) -> bool:
    """Check whether a field is present and holds a number."""
    return key in obj and _is_number(obj[key])


is_int = is_numeric


def get_bool(obj: Dict[str, Any], key: str, default: bool) -> bool:
    """
    Read a boolean field.

    The strings "true" and "false" are accepted for compatibility with
    legacy producers.

    Raises:
        TypeMismatchError: If the field is present but not a boolean
    """
    if key not in obj:
        return default
    value = obj[key]
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise TypeMismatchError(key, "a boolean", value)


def get_int(obj: Dict[str, Any], key: str, default: int) -> int:
    """Read an integer field; fractional numbers are truncated toward zero."""
    if key not in obj:
        return default
    return as_int(obj[key], key)


def as_int(value: Any, name: str = "value") -> int:
    """Coerce a JSON number to int, raising TypeMismatchError otherwise."""
    if not _is_number(value) or (isinstance(value, float) and not math.isfinite(value)):
        raise TypeMismatchError(name, "an integer", value)
    return int(value)


def get_float(obj: Dict[str, Any], key: str, default: float) -> float:
    """Read a number field, narrowed to single precision."""
    if key not in obj:
        return default
    return as_float32(obj[key], key)


def as_float32(value: Any, name: str = "value") -> float:
    """Narrow a JSON number to float32, raising TypeMismatchError if it is not a finite one."""
    if not _is_number(value):
        raise TypeMismatchError(name, "a float", value)
    try:
        with np.errstate(over="ignore"):
            narrowed = to_float32(value)
    except OverflowError as e:
        raise TypeMismatchError(name, "a finite float", value) from e
    if not math.isfinite(narrowed):
        raise TypeMismatchError(name, "a finite float", value)
    return narrowed


def get_string(obj: Dict[str, Any], key: str, default: Optional[str] = None) -> Optional[str]:
    if key not in obj:
        return default
    value = obj[key]
    if not isinstance(value, str):
        raise TypeMismatchError(key, "a string", value)
    return value


def get_object(obj: Dict[str, Any], key: str, default: Optional[dict] = None) -> Optional[dict]:
    if key not in obj:
        return default
    value = obj[key]
    if not isinstance(value, dict):
        raise TypeMismatchError(key, "an object", value)
    return value


def get_array(obj: Dict[str, Any], key: str, default: Optional[list] = None) -> Optional[list]:
    if key not in obj:
        return default
    value = obj[key]
    if not isinstance(value, list):
        raise TypeMismatchError(key, "an array", value)
    return value


def require_object(node: Any, what: str = "root") -> Dict[str, Any]:
    """Check that a node is a JSON object."""
    if not isinstance(node, dict):
        raise MalformedDataError(f"Expected a JSON object for {what}, got {type(node).__name__}")
    return node


def write_float(value: float) -> float:
    """
    Get the value to emit for a single-precision float.

    Uses the shortest decimal that round-trips through float32, so 0.1f is
    written as 0.1 rather than 0.10000000149011612.
    """
    return float(str(np.float32(value)))


def write_vector3(vector: Vector3Float) -> List[float]:
    return [write_float(vector.x), write_float(vector.y), write_float(vector.z)]


def write_vector2(vector: Vector2Float) -> List[float]:
    return [write_float(vector.x), write_float(vector.y)]


def _read_components(node: Any, size: int) -> List[float]:
    if not isinstance(node, list):
        raise MalformedDataError(f"Expected an array of {size} numbers, got {type(node).__name__}")
    if len(node) != size:
        raise MalformedDataError(f"Expected an array of {size} numbers, got {len(node)} element(s)")
    return [as_float32(component, f"[{i}]") for i, component in enumerate(node)]


def read_vector3(node: Any) -> Vector3Float:
    """Read a ``[x, y, z]`` array."""
    x, y, z = _read_components(node, 3)
    return Vector3Float(x, y, z)


def read_vector2(node: Any) -> Vector2Float:
    """Read a ``[x, y]`` array."""
    x, y = _read_components(node, 2)
    return Vector2Float(x, y)
