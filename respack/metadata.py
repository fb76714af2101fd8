"""
Metadata parts and the collections that hold them.

A metadata document (``pack.mcmeta`` or a texture's ``.png.mcmeta``) is a
JSON object whose top-level properties are independent *parts*. Each part
type owns one property name, so unrelated modules can add their own parts
without the core knowing their shape:

    >>> @dataclass(frozen=True)
    ... class OverlayMeta(MetadataPart):
    ...     PROPERTY = "overlays"
    ...     entries: Tuple[str, ...] = ()
    ...     ...
    >>> registry = default_registry()
    >>> registry.register(OverlayMeta)

A collection holds at most one part per type tag; putting a part with an
existing tag replaces it.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple, Type, Union

from respack.errors import MalformedDataError, MetadataConflictError, TypeMismatchError
from respack.jsonutil import (
    as_int, get_array, get_bool, get_int, get_string, is_numeric, require_object,
)

logger = logging.getLogger(__name__)

PRESERVE = "preserve"
DROP = "drop"


class MetadataPart(ABC):
    """
    Base class for every metadata part.

    Subclasses are frozen dataclasses that set ``PROPERTY`` (the JSON
    property they are written under) and implement :meth:`to_json` and
    :meth:`from_json`.
    """

    PROPERTY: str = ""

    def tag(self) -> Hashable:
        """Stable type tag used as the key in a :class:`Metadata` collection."""
        return type(self)

    def properties(self) -> List[Tuple[str, Any]]:
        """Named properties in declaration order, for equality and debugging."""
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    @abstractmethod
    def to_json(self) -> Any:
        """Build the JSON value written under ``PROPERTY``."""

    @classmethod
    @abstractmethod
    def from_json(cls, node: Any) -> "MetadataPart":
        """Read a part from the JSON value found under ``PROPERTY``."""

    @property
    def property_name(self) -> str:
        return self.PROPERTY


# ---------------------------------------------------------------------------
# Pack-level parts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PackMeta(MetadataPart):
    """
    Pack format version and description (``"pack"``).

    ``description`` is plain text or a JSON text component (object or
    array), which is kept as-is so formatting survives a round trip.
    ``supported_formats`` is an optional inclusive (min, max) range.
    """
    PROPERTY = "pack"

    format: int
    description: Union[str, dict, list]
    supported_formats: Optional[Tuple[int, int]] = None

    def __hash__(self) -> int:
        return hash((self.format, json.dumps(self.description, sort_keys=True), self.supported_formats))

    def plain_description(self) -> str:
        """The description with text components flattened to their text."""
        return _read_description(self.description)

    def to_json(self) -> Any:
        d: Dict[str, Any] = {
            "pack_format": self.format,
            "description": copy.deepcopy(self.description),
        }
        if self.supported_formats is not None:
            d["supported_formats"] = list(self.supported_formats)
        return d

    @classmethod
    def from_json(cls, node: Any) -> "PackMeta":
        obj = require_object(node, cls.PROPERTY)
        if "pack_format" not in obj:
            raise MalformedDataError("Pack metadata is missing pack_format")
        if not is_numeric(obj, "pack_format"):
            raise TypeMismatchError("pack_format", "an integer", obj["pack_format"])
        return cls(
            format=get_int(obj, "pack_format", -1),
            description=_check_description(obj.get("description", "")),
            supported_formats=_read_format_range(obj.get("supported_formats")),
        )


def _check_description(node: Any) -> Any:
    _read_description(node)
    return copy.deepcopy(node)


def _read_description(node: Any) -> str:
    # Text components are flattened to their plain text
    if isinstance(node, str):
        return node
    if isinstance(node, dict):
        return _read_description(node.get("text", "")) + "".join(
            _read_description(extra) for extra in node.get("extra", [])
        )
    if isinstance(node, list):
        return "".join(_read_description(part) for part in node)
    raise TypeMismatchError("description", "a string or text component", node)


def _read_format_range(node: Any) -> Optional[Tuple[int, int]]:
    if node is None:
        return None
    if isinstance(node, int) and not isinstance(node, bool):
        return (node, node)
    if isinstance(node, list) and len(node) == 2:
        return (as_int(node[0], "supported_formats[0]"), as_int(node[1], "supported_formats[1]"))
    if isinstance(node, dict):
        return (get_int(node, "min_inclusive", 0), get_int(node, "max_inclusive", 0))
    raise MalformedDataError("supported_formats must be an integer, a [min, max] array or an object")


@dataclass(frozen=True)
class FilterPattern:
    """Regular expressions matched against a resource's namespace and path."""
    namespace: Optional[str] = None
    path: Optional[str] = None

    def __post_init__(self):
        if self.namespace is None and self.path is None:
            raise ValueError("FilterPattern needs a namespace or a path pattern")

    def to_json(self) -> Dict[str, str]:
        d = {}
        if self.namespace is not None:
            d["namespace"] = self.namespace
        if self.path is not None:
            d["path"] = self.path
        return d


@dataclass(frozen=True)
class FilterMeta(MetadataPart):
    """Resources from lower packs to hide (``"filter"``)."""
    PROPERTY = "filter"

    patterns: Tuple[FilterPattern, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "patterns", tuple(self.patterns))

    def to_json(self) -> Any:
        return {"block": [pattern.to_json() for pattern in self.patterns]}

    @classmethod
    def from_json(cls, node: Any) -> "FilterMeta":
        obj = require_object(node, cls.PROPERTY)
        patterns = []
        for entry in get_array(obj, "block", []):
            entry = require_object(entry, "filter pattern")
            namespace = get_string(entry, "namespace")
            path = get_string(entry, "path")
            if namespace is None and path is None:
                raise MalformedDataError("Filter pattern needs a namespace or a path")
            patterns.append(FilterPattern(namespace, path))
        return cls(tuple(patterns))


@dataclass(frozen=True)
class LanguageEntry:
    name: str
    region: str
    bidirectional: bool = False


@dataclass(frozen=True)
class LanguageMeta(MetadataPart):
    """Languages the pack adds, keyed by language code (``"language"``)."""
    PROPERTY = "language"

    languages: Dict[str, LanguageEntry] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "languages", dict(self.languages))

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.languages.items())))

    def to_json(self) -> Any:
        d = {}
        for code, entry in self.languages.items():
            e: Dict[str, Any] = {"name": entry.name, "region": entry.region}
            if entry.bidirectional:
                e["bidirectional"] = True
            d[code] = e
        return d

    @classmethod
    def from_json(cls, node: Any) -> "LanguageMeta":
        obj = require_object(node, cls.PROPERTY)
        languages = {}
        for code, entry in obj.items():
            entry = require_object(entry, f"language '{code}'")
            languages[code] = LanguageEntry(
                name=get_string(entry, "name", ""),
                region=get_string(entry, "region", ""),
                bidirectional=get_bool(entry, "bidirectional", False),
            )
        return cls(languages)


@dataclass(frozen=True)
class SodiumMeta(MetadataPart):
    """Core shaders the Sodium renderer should not warn about (``"sodium"``)."""
    PROPERTY = "sodium"

    ignored_shaders: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "ignored_shaders", tuple(self.ignored_shaders))

    def to_json(self) -> Any:
        return {"ignored_shaders": list(self.ignored_shaders)}

    @classmethod
    def from_json(cls, node: Any) -> "SodiumMeta":
        obj = require_object(node, cls.PROPERTY)
        shaders = get_array(obj, "ignored_shaders", [])
        for shader in shaders:
            if not isinstance(shader, str):
                raise TypeMismatchError("ignored_shaders", "an array of strings", shader)
        return cls(tuple(shaders))


# ---------------------------------------------------------------------------
# Texture-level parts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnimationFrame:
    index: int
    time: int = -1


@dataclass(frozen=True)
class AnimationMeta(MetadataPart):
    """
    Texture animation (``"animation"``).

    ``width``/``height`` of -1 and an empty ``frames`` tuple mean "derive
    from the image"; a frame ``time`` of -1 means "use frame_time".
    """
    PROPERTY = "animation"

    interpolate: bool = False
    width: int = -1
    height: int = -1
    frame_time: int = 1
    frames: Tuple[AnimationFrame, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "frames", tuple(self.frames))

    def to_json(self) -> Any:
        d: Dict[str, Any] = {}
        if self.interpolate:
            d["interpolate"] = True
        if self.width != -1:
            d["width"] = self.width
        if self.height != -1:
            d["height"] = self.height
        if self.frame_time != 1:
            d["frametime"] = self.frame_time
        if self.frames:
            d["frames"] = [
                frame.index if frame.time == -1 else {"index": frame.index, "time": frame.time}
                for frame in self.frames
            ]
        return d

    @classmethod
    def from_json(cls, node: Any) -> "AnimationMeta":
        obj = require_object(node, cls.PROPERTY)
        frames = []
        for frame in get_array(obj, "frames", []):
            if isinstance(frame, dict):
                frames.append(AnimationFrame(get_int(frame, "index", 0), get_int(frame, "time", -1)))
            else:
                frames.append(AnimationFrame(as_int(frame, "frames")))
        return cls(
            interpolate=get_bool(obj, "interpolate", False),
            width=get_int(obj, "width", -1),
            height=get_int(obj, "height", -1),
            frame_time=get_int(obj, "frametime", 1),
            frames=tuple(frames),
        )


@dataclass(frozen=True)
class TextureMeta(MetadataPart):
    """Texture sampling flags (``"texture"``)."""
    PROPERTY = "texture"

    blur: bool = False
    clamp: bool = False

    def to_json(self) -> Any:
        d = {}
        if self.blur:
            d["blur"] = True
        if self.clamp:
            d["clamp"] = True
        return d

    @classmethod
    def from_json(cls, node: Any) -> "TextureMeta":
        obj = require_object(node, cls.PROPERTY)
        return cls(blur=get_bool(obj, "blur", False), clamp=get_bool(obj, "clamp", False))


VILLAGER_HATS = ("none", "partial", "full")


@dataclass(frozen=True)
class VillagerMeta(MetadataPart):
    """Villager profession hat style (``"villager"``)."""
    PROPERTY = "villager"

    hat: str = "none"

    def __post_init__(self):
        if self.hat not in VILLAGER_HATS:
            raise ValueError(f"Invalid villager hat: {self.hat}, expected one of {VILLAGER_HATS}")

    def to_json(self) -> Any:
        return {"hat": self.hat}

    @classmethod
    def from_json(cls, node: Any) -> "VillagerMeta":
        obj = require_object(node, cls.PROPERTY)
        hat = get_string(obj, "hat", "none")
        if hat not in VILLAGER_HATS:
            raise MalformedDataError(f"Invalid villager hat: {hat}")
        return cls(hat)


@dataclass(frozen=True, eq=False)
class RawMetaPart(MetadataPart):
    """An unrecognised property, kept verbatim so it can be written back."""
    name: str
    value: Any

    def tag(self) -> Hashable:
        return ("raw", self.name)

    @property
    def property_name(self) -> str:
        return self.name

    def to_json(self) -> Any:
        return copy.deepcopy(self.value)

    @classmethod
    def from_json(cls, node: Any) -> "RawMetaPart":
        raise TypeError("RawMetaPart is built by read_metadata, not decoded")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawMetaPart):
            return NotImplemented
        return self.name == other.name and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.name, json.dumps(self.value, sort_keys=True)))


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

class Metadata:
    """
    A set of metadata parts, at most one per tag.

    Example:
        >>> meta = Metadata.of(PackMeta(15, "My pack"), SodiumMeta(("rendertype_solid",)))
        >>> meta.get(PackMeta).format
        15
    """

    def __init__(self):
        self._parts: Dict[Hashable, MetadataPart] = {}

    @classmethod
    def of(cls, *parts: MetadataPart) -> "Metadata":
        metadata = cls()
        for part in parts:
            metadata.put(part)
        return metadata

    def put(self, part: MetadataPart) -> "Metadata":
        if not isinstance(part, MetadataPart):
            raise TypeError(f"Expected a MetadataPart, got {type(part).__name__}")
        self._parts[part.tag()] = part
        return self

    def get(self, tag: Hashable) -> Optional[MetadataPart]:
        return self._parts.get(tag)

    def remove(self, tag: Hashable) -> Optional[MetadataPart]:
        return self._parts.pop(tag, None)

    def all(self) -> List[MetadataPart]:
        return list(self._parts.values())

    def is_empty(self) -> bool:
        return not self._parts

    def copy(self) -> "Metadata":
        return Metadata.of(*self._parts.values())

    def __len__(self) -> int:
        return len(self._parts)

    def __iter__(self) -> Iterator[MetadataPart]:
        return iter(self._parts.values())

    def __contains__(self, tag: Hashable) -> bool:
        return tag in self._parts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Metadata):
            return NotImplemented
        return self._parts == other._parts

    def __hash__(self) -> int:
        return hash(frozenset(self._parts.values()))

    def __repr__(self) -> str:
        return f"Metadata({', '.join(repr(p) for p in self._parts.values())})"


class MetadataPartRegistry:
    """Maps metadata property names to the part classes that decode them."""

    def __init__(self):
        self._decoders: Dict[str, Type[MetadataPart]] = {}

    def register(self, part_cls: Type[MetadataPart]) -> "MetadataPartRegistry":
        if not part_cls.PROPERTY:
            raise ValueError(f"{part_cls.__name__} does not define PROPERTY")
        self._decoders[part_cls.PROPERTY] = part_cls
        return self

    def decoder_for(self, name: str) -> Optional[Type[MetadataPart]]:
        return self._decoders.get(name)

    def names(self) -> List[str]:
        return sorted(self._decoders)

    def copy(self) -> "MetadataPartRegistry":
        registry = MetadataPartRegistry()
        registry._decoders.update(self._decoders)
        return registry

    def __contains__(self, name: str) -> bool:
        return name in self._decoders


BUILTIN_PARTS = (
    PackMeta, FilterMeta, LanguageMeta, SodiumMeta,
    AnimationMeta, TextureMeta, VillagerMeta,
)


def default_registry() -> MetadataPartRegistry:
    """Get a new registry that knows every built-in part."""
    registry = MetadataPartRegistry()
    for part_cls in BUILTIN_PARTS:
        registry.register(part_cls)
    return registry


def write_metadata(metadata: Metadata) -> Dict[str, Any]:
    """
    Build the JSON object for a metadata document.

    Properties are sorted by name, except "pack" which always comes first.

    Raises:
        MetadataConflictError: If two parts share a property name
    """
    parts = sorted(
        metadata.all(),
        key=lambda part: (part.property_name != PackMeta.PROPERTY, part.property_name),
    )
    written: Dict[str, MetadataPart] = {}
    for part in parts:
        if part.property_name in written:
            raise MetadataConflictError(part.property_name, written[part.property_name], part)
        written[part.property_name] = part
    return {name: part.to_json() for name, part in written.items()}


def read_metadata(
    node: Any,
    registry: Optional[MetadataPartRegistry] = None,
    unknown: str = PRESERVE,
) -> Metadata:
    """
    Read a metadata document.

    Args:
        node: Parsed JSON of the document
        registry: Known part decoders (built-in parts if None)
        unknown: PRESERVE keeps unknown properties as RawMetaPart,
                 DROP discards them

    Raises:
        MalformedDataError: If the root is not an object or a known part
            fails to decode
    """
    registry = registry or default_registry()
    obj = require_object(node, "metadata")
    metadata = Metadata()
    for name, value in obj.items():
        part_cls = registry.decoder_for(name)
        if part_cls is not None:
            metadata.put(part_cls.from_json(value))
        elif unknown == PRESERVE:
            metadata.put(RawMetaPart(name, copy.deepcopy(value)))
        else:
            logger.warning("Dropping unknown metadata property '%s'", name)
    return metadata
