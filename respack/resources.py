"""
Typed resources stored in a resource pack.

Each resource is identified by a :class:`Key` and knows its :class:`Kind`,
which fixes the file it is written to. JSON resources implement
``to_json()``/``from_json(key, node)``; binary resources carry a
:class:`Writable`.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from respack.base import Vector3Float, Writable, to_float32
from respack.errors import MalformedDataError, TypeMismatchError
from respack.jsonutil import (
    get_array, get_bool, get_float, get_int, get_object, get_string,
    read_vector3, require_object, write_float, write_vector3,
)
from respack.key import Key
from respack.metadata import Metadata
from respack.paths import Kind, path_for, sound_registry_path


def _read_key(obj: Dict[str, Any], name: str) -> Optional[Key]:
    value = get_string(obj, name)
    if value is None:
        return None
    try:
        return Key.of(value)
    except ValueError as e:
        raise MalformedDataError(f"Field '{name}' is not a valid key: {value!r}") from e


def _freeze_objects(items, what: str) -> Tuple[dict, ...]:
    items = tuple(items)
    for item in items:
        if not isinstance(item, dict):
            raise TypeMismatchError(what, "an array of objects", item)
    return items


class Resource:
    """Mixin for resources addressed by a key."""

    KIND: Kind

    def path(self) -> str:
        return path_for(self.KIND, self.key)

    def describe(self) -> str:
        return f"{self.KIND.label} {self.key}"


# ---------------------------------------------------------------------------
# Block states
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Variant:
    """One model choice of a block state variant."""
    model: Key
    x: int = 0
    y: int = 0
    uvlock: bool = False
    weight: int = 1

    def to_json(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"model": str(self.model)}
        if self.x != 0:
            d["x"] = self.x
        if self.y != 0:
            d["y"] = self.y
        if self.uvlock:
            d["uvlock"] = True
        if self.weight != 1:
            d["weight"] = self.weight
        return d

    @classmethod
    def from_json(cls, node: Any) -> "Variant":
        obj = require_object(node, "variant")
        model = _read_key(obj, "model")
        if model is None:
            raise MalformedDataError("Block state variant is missing 'model'")
        return cls(
            model=model,
            x=get_int(obj, "x", 0),
            y=get_int(obj, "y", 0),
            uvlock=get_bool(obj, "uvlock", False),
            weight=get_int(obj, "weight", 1),
        )


def _write_variants(variants: Tuple[Variant, ...]) -> Any:
    if len(variants) == 1:
        return variants[0].to_json()
    return [variant.to_json() for variant in variants]


def _read_variants(node: Any) -> Tuple[Variant, ...]:
    if isinstance(node, list):
        return tuple(Variant.from_json(entry) for entry in node)
    return (Variant.from_json(node),)


@dataclass(frozen=True)
class BlockState(Resource):
    """
    Block state definition (``blockstates/<value>.json``).

    ``variants`` maps a property selector such as ``"facing=north"`` to the
    models it can use. Multipart cases are kept as JSON objects.
    """
    KIND = Kind.BLOCK_STATE

    key: Key
    variants: Dict[str, Tuple[Variant, ...]] = field(default_factory=dict)
    multipart: Tuple[dict, ...] = ()

    def __post_init__(self):
        variants = {}
        for selector, models in self.variants.items():
            if isinstance(models, Variant):
                models = (models,)
            variants[selector] = tuple(models)
        object.__setattr__(self, "variants", variants)
        object.__setattr__(self, "multipart", _freeze_objects(self.multipart, "multipart"))

    def __hash__(self) -> int:
        return hash((self.key, tuple(sorted(self.variants.items()))))

    def to_json(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.variants:
            d["variants"] = {
                selector: _write_variants(models) for selector, models in self.variants.items()
            }
        if self.multipart:
            d["multipart"] = copy.deepcopy(list(self.multipart))
        return d

    @classmethod
    def from_json(cls, key: Key, node: Any) -> "BlockState":
        obj = require_object(node, "block state")
        variants = {
            selector: _read_variants(models)
            for selector, models in get_object(obj, "variants", {}).items()
        }
        return cls(key, variants, _freeze_objects(get_array(obj, "multipart", []), "multipart"))


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Font(Resource):
    """Font definition (``font/<value>.json``); providers are kept as JSON objects."""
    KIND = Kind.FONT

    key: Key
    providers: Tuple[dict, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "providers", _freeze_objects(self.providers, "providers"))

    def __hash__(self) -> int:
        return hash((self.key, len(self.providers)))

    def with_provider(self, provider: dict) -> "Font":
        return Font(self.key, self.providers + (provider,))

    def to_json(self) -> Dict[str, Any]:
        return {"providers": copy.deepcopy(list(self.providers))}

    @classmethod
    def from_json(cls, key: Key, node: Any) -> "Font":
        obj = require_object(node, "font")
        return cls(key, _freeze_objects(get_array(obj, "providers", []), "providers"))


# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Language(Resource):
    """Translation table (``lang/<value>.json``), e.g. ``minecraft:en_us``."""
    KIND = Kind.LANGUAGE

    key: Key
    translations: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "translations", dict(self.translations))

    def __hash__(self) -> int:
        return hash((self.key, tuple(sorted(self.translations.items()))))

    def translation(self, name: str) -> Optional[str]:
        return self.translations.get(name)

    def to_json(self) -> Dict[str, Any]:
        return dict(sorted(self.translations.items()))

    @classmethod
    def from_json(cls, key: Key, node: Any) -> "Language":
        obj = require_object(node, "language")
        for name, value in obj.items():
            if not isinstance(value, str):
                raise TypeMismatchError(name, "a string", value)
        return cls(key, obj)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

DISPLAY_SLOTS = (
    "thirdperson_righthand", "thirdperson_lefthand",
    "firstperson_righthand", "firstperson_lefthand",
    "gui", "head", "ground", "fixed",
)


@dataclass(frozen=True)
class ItemTransform:
    """Rotation, translation and scale of a model in one display slot."""
    rotation: Vector3Float = Vector3Float.ZERO
    translation: Vector3Float = Vector3Float.ZERO
    scale: Vector3Float = Vector3Float.ONE

    def to_json(self) -> Dict[str, Any]:
        d = {}
        if self.rotation != Vector3Float.ZERO:
            d["rotation"] = write_vector3(self.rotation)
        if self.translation != Vector3Float.ZERO:
            d["translation"] = write_vector3(self.translation)
        if self.scale != Vector3Float.ONE:
            d["scale"] = write_vector3(self.scale)
        return d

    @classmethod
    def from_json(cls, node: Any) -> "ItemTransform":
        obj = require_object(node, "display transform")
        return cls(
            rotation=read_vector3(obj["rotation"]) if "rotation" in obj else Vector3Float.ZERO,
            translation=read_vector3(obj["translation"]) if "translation" in obj else Vector3Float.ZERO,
            scale=read_vector3(obj["scale"]) if "scale" in obj else Vector3Float.ONE,
        )


GUI_LIGHTS = ("front", "side")


@dataclass(frozen=True)
class Model(Resource):
    """
    Block or item model (``models/<value>.json``).

    Element geometry is kept as JSON objects; display transforms are typed
    so their vectors go through the single-precision codec.
    """
    KIND = Kind.MODEL

    key: Key
    parent: Optional[Key] = None
    ambient_occlusion: bool = True
    gui_light: Optional[str] = None
    textures: Dict[str, str] = field(default_factory=dict)
    display: Dict[str, ItemTransform] = field(default_factory=dict)
    elements: Tuple[dict, ...] = ()

    def __post_init__(self):
        if self.gui_light is not None and self.gui_light not in GUI_LIGHTS:
            raise ValueError(f"Invalid gui_light: {self.gui_light}, expected one of {GUI_LIGHTS}")
        object.__setattr__(self, "textures", dict(self.textures))
        object.__setattr__(self, "display", dict(self.display))
        object.__setattr__(self, "elements", _freeze_objects(self.elements, "elements"))

    def __hash__(self) -> int:
        return hash((self.key, self.parent, tuple(sorted(self.textures.items()))))

    def to_json(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.parent is not None:
            d["parent"] = str(self.parent)
        if not self.ambient_occlusion:
            d["ambientocclusion"] = False
        if self.gui_light is not None:
            d["gui_light"] = self.gui_light
        if self.textures:
            d["textures"] = dict(self.textures)
        if self.display:
            ordered = sorted(
                self.display.items(),
                key=lambda item: (
                    DISPLAY_SLOTS.index(item[0]) if item[0] in DISPLAY_SLOTS else len(DISPLAY_SLOTS),
                    item[0],
                ),
            )
            d["display"] = {slot: transform.to_json() for slot, transform in ordered}
        if self.elements:
            d["elements"] = copy.deepcopy(list(self.elements))
        return d

    @classmethod
    def from_json(cls, key: Key, node: Any) -> "Model":
        obj = require_object(node, "model")
        textures = get_object(obj, "textures", {})
        for name, value in textures.items():
            if not isinstance(value, str):
                raise TypeMismatchError(f"textures.{name}", "a string", value)
        gui_light = get_string(obj, "gui_light")
        if gui_light is not None and gui_light not in GUI_LIGHTS:
            raise MalformedDataError(f"Invalid gui_light: {gui_light}")
        return cls(
            key=key,
            parent=_read_key(obj, "parent"),
            ambient_occlusion=get_bool(obj, "ambientocclusion", True),
            gui_light=gui_light,
            textures=textures,
            display={
                slot: ItemTransform.from_json(transform)
                for slot, transform in get_object(obj, "display", {}).items()
            },
            elements=_freeze_objects(get_array(obj, "elements", []), "elements"),
        )


# ---------------------------------------------------------------------------
# Sounds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SoundFile(Resource):
    """Ogg Vorbis sound data (``sounds/<value>.ogg``)."""
    KIND = Kind.SOUND

    key: Key
    data: Writable


SOUND_ENTRY_TYPES = ("file", "event")


@dataclass(frozen=True)
class SoundEntry:
    """
    One sound an event may play.

    ``key`` names a sound file (or another event when ``type`` is "event").
    An entry with every option at its default is written as a bare string.
    """
    key: Key
    type: str = "file"
    volume: float = 1.0
    pitch: float = 1.0
    weight: int = 1
    stream: bool = False
    attenuation_distance: int = 16
    preload: bool = False

    def __post_init__(self):
        if self.type not in SOUND_ENTRY_TYPES:
            raise ValueError(f"Invalid sound type: {self.type}, expected one of {SOUND_ENTRY_TYPES}")
        object.__setattr__(self, "volume", to_float32(self.volume))
        object.__setattr__(self, "pitch", to_float32(self.pitch))

    def to_json(self) -> Any:
        d: Dict[str, Any] = {"name": str(self.key)}
        if self.type != "file":
            d["type"] = self.type
        if self.volume != 1.0:
            d["volume"] = write_float(self.volume)
        if self.pitch != 1.0:
            d["pitch"] = write_float(self.pitch)
        if self.weight != 1:
            d["weight"] = self.weight
        if self.stream:
            d["stream"] = True
        if self.attenuation_distance != 16:
            d["attenuation_distance"] = self.attenuation_distance
        if self.preload:
            d["preload"] = True
        if len(d) == 1:
            return d["name"]
        return d

    @classmethod
    def from_json(cls, node: Any) -> "SoundEntry":
        if isinstance(node, str):
            node = {"name": node}
        obj = require_object(node, "sound entry")
        key = _read_key(obj, "name")
        if key is None:
            raise MalformedDataError("Sound entry is missing 'name'")
        sound_type = get_string(obj, "type", "file")
        if sound_type not in SOUND_ENTRY_TYPES:
            raise MalformedDataError(f"Invalid sound type: {sound_type}")
        return cls(
            key=key,
            type=sound_type,
            volume=get_float(obj, "volume", 1.0),
            pitch=get_float(obj, "pitch", 1.0),
            weight=get_int(obj, "weight", 1),
            stream=get_bool(obj, "stream", False),
            attenuation_distance=get_int(obj, "attenuation_distance", 16),
            preload=get_bool(obj, "preload", False),
        )


@dataclass(frozen=True)
class SoundEvent:
    """A named sound event; its key's value is the event name in sounds.json."""
    key: Key
    sounds: Tuple[SoundEntry, ...] = ()
    replace: bool = False
    subtitle: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "sounds", tuple(self.sounds))

    def to_json(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.replace:
            d["replace"] = True
        if self.subtitle is not None:
            d["subtitle"] = self.subtitle
        d["sounds"] = [entry.to_json() for entry in self.sounds]
        return d

    @classmethod
    def from_json(cls, key: Key, node: Any) -> "SoundEvent":
        obj = require_object(node, f"sound event '{key.value}'")
        return cls(
            key=key,
            sounds=tuple(SoundEntry.from_json(entry) for entry in get_array(obj, "sounds", [])),
            replace=get_bool(obj, "replace", False),
            subtitle=get_string(obj, "subtitle"),
        )


@dataclass(frozen=True)
class SoundRegistry:
    """All sound events of one namespace (``assets/<namespace>/sounds.json``)."""
    KIND = Kind.SOUND_REGISTRY

    namespace: str
    events: Tuple[SoundEvent, ...] = ()

    def __post_init__(self):
        events = tuple(self.events)
        for event in events:
            if event.key.namespace != self.namespace:
                raise ValueError(
                    f"Sound event {event.key} does not belong to namespace '{self.namespace}'"
                )
        object.__setattr__(self, "events", events)

    @property
    def key(self) -> str:
        return self.namespace

    def event(self, name: str) -> Optional[SoundEvent]:
        for event in self.events:
            if event.key.value == name:
                return event
        return None

    def merged(self, events: List[SoundEvent]) -> "SoundRegistry":
        """Get a registry where ``events`` replace same-named events."""
        by_name = {event.key.value: event for event in self.events}
        for event in events:
            by_name[event.key.value] = event
        return SoundRegistry(self.namespace, tuple(by_name.values()))

    def path(self) -> str:
        return sound_registry_path(self.namespace)

    def describe(self) -> str:
        return f"sound registry {self.namespace}"

    def to_json(self) -> Dict[str, Any]:
        return {event.key.value: event.to_json() for event in self.events}

    @classmethod
    def from_json(cls, namespace: str, node: Any) -> "SoundRegistry":
        obj = require_object(node, "sound registry")
        events = []
        for name, event in obj.items():
            try:
                key = Key(namespace, name)
            except ValueError as e:
                raise MalformedDataError(f"Invalid sound event name: {name!r}") from e
            events.append(SoundEvent.from_json(key, event))
        return cls(namespace, tuple(events))


# ---------------------------------------------------------------------------
# Textures and texts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Texture(Resource):
    """
    PNG texture (``textures/<value>.png``).

    Non-empty ``meta`` is written next to it as ``<value>.png.mcmeta``.
    """
    KIND = Kind.TEXTURE

    key: Key
    data: Writable
    meta: Metadata = field(default_factory=Metadata)

    def meta_path(self) -> str:
        return path_for(Kind.TEXTURE_META, self.key)

    def with_meta(self, meta: Metadata) -> "Texture":
        return Texture(self.key, self.data, meta)


@dataclass(frozen=True)
class Text(Resource):
    """Plain text file (``texts/<value>.txt``), such as splashes or credits."""
    KIND = Kind.TEXT

    key: Key
    content: str
