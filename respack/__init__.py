"""
respack - Build resource packs in memory and serialize them to a file tree.

A pack serializes to a virtual file tree (relative path -> bytes):
- pack.png (optional icon)
- pack.mcmeta (pack metadata and extension parts)
- assets/<namespace>/blockstates|font|lang|models/<value>.json
- assets/<namespace>/sounds.json and sounds/<value>.ogg
- assets/<namespace>/textures/<value>.png (+ .png.mcmeta)
- assets/<namespace>/texts/<value>.txt
- any extra files added by path
"""

__version__ = "0.1.0"

from respack.base import Vector2Float, Vector3Float, Writable
from respack.errors import (
    PackError, InvalidPathError, InvalidKeyError, MalformedDataError, TypeMismatchError,
    PathCollisionError, DuplicateResourceError, ResourceDecodeError, ResourceDecodeErrors,
    MetadataConflictError,
)
from respack.key import Key
from respack.metadata import (
    Metadata, MetadataPart, MetadataPartRegistry, default_registry,
    PackMeta, FilterMeta, FilterPattern, LanguageMeta, LanguageEntry, SodiumMeta,
    AnimationMeta, AnimationFrame, TextureMeta, VillagerMeta, RawMetaPart,
)
from respack.pack import ResourcePack
from respack.paths import Kind, path_for
from respack.resources import (
    BlockState, Variant, Font, Language, Model, ItemTransform,
    SoundFile, SoundEntry, SoundEvent, SoundRegistry, Texture, Text,
)
from respack.serialize import SerializerOptions, serialize, deserialize
from respack.tree import FileTree

__all__ = [
    "Vector2Float",
    "Vector3Float",
    "Writable",
    "PackError",
    "InvalidPathError",
    "InvalidKeyError",
    "MalformedDataError",
    "TypeMismatchError",
    "PathCollisionError",
    "DuplicateResourceError",
    "ResourceDecodeError",
    "ResourceDecodeErrors",
    "MetadataConflictError",
    "Key",
    "Metadata",
    "MetadataPart",
    "MetadataPartRegistry",
    "default_registry",
    "PackMeta",
    "FilterMeta",
    "FilterPattern",
    "LanguageMeta",
    "LanguageEntry",
    "SodiumMeta",
    "AnimationMeta",
    "AnimationFrame",
    "TextureMeta",
    "VillagerMeta",
    "RawMetaPart",
    "ResourcePack",
    "Kind",
    "path_for",
    "BlockState",
    "Variant",
    "Font",
    "Language",
    "Model",
    "ItemTransform",
    "SoundFile",
    "SoundEntry",
    "SoundEvent",
    "SoundRegistry",
    "Texture",
    "Text",
    "SerializerOptions",
    "serialize",
    "deserialize",
    "FileTree",
]
