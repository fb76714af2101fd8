"""
Serialize a ResourcePack to a virtual file tree and read one back.

Forward direction (``serialize``) writes, in order: the icon, pack.mcmeta,
every typed resource kind (each sorted by key) and finally the extra
files. Two contributors claiming the same path is a programming error and
raises PathCollisionError.

Reverse direction (``deserialize``) classifies each path by its kind
directory and extension, decodes matched files and keeps everything else
as extra files.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from respack.base import Writable
from respack.errors import PackError, ResourceDecodeError, ResourceDecodeErrors
from respack.jsonutil import dumps, parse_string
from respack.key import Key
from respack.metadata import (
    DROP, PRESERVE, Metadata, MetadataPartRegistry, default_registry, read_metadata,
    write_metadata,
)
from respack.pack import ResourcePack
from respack.paths import PACK_ICON, PACK_METADATA, Kind, classify
from respack.resources import (
    BlockState, Font, Language, Model, SoundFile, SoundRegistry, Text, Texture,
)
from respack.tree import FileContent, FileTree

logger = logging.getLogger(__name__)

UNKNOWN_METADATA_POLICIES = (PRESERVE, DROP)


@dataclass
class SerializerOptions:
    """
    Settings for serialize/deserialize.

    Attributes:
        lenient: Collect decode failures and report them together at the end
                 instead of stopping at the first one
        unknown_metadata: "preserve" keeps unrecognised metadata properties,
                          "drop" discards them
        indent: JSON indentation of written files (None for compact output)
        parts: Metadata part decoders known to the reader
    """
    lenient: bool = False
    unknown_metadata: str = PRESERVE
    indent: Optional[int] = 2
    parts: MetadataPartRegistry = field(default_factory=default_registry)

    def __post_init__(self):
        if self.unknown_metadata not in UNKNOWN_METADATA_POLICIES:
            raise ValueError(
                f"Invalid unknown_metadata policy: {self.unknown_metadata}, "
                f"expected one of {UNKNOWN_METADATA_POLICIES}"
            )


# ---------------------------------------------------------------------------
# Forward
# ---------------------------------------------------------------------------

def _json_writable(node, indent: Optional[int]) -> Writable:
    return Writable.from_supplier(lambda: dumps(node, indent).encode("utf-8"))


def serialize(pack: ResourcePack, options: Optional[SerializerOptions] = None) -> FileTree:
    """
    Serialize a pack to a file tree.

    The pack is only read, so serializing the same pack again yields an
    identical tree.

    Args:
        pack: Pack to serialize
        options: Serializer settings (defaults if None)

    Returns:
        FileTree mapping each path to its content

    Raises:
        PathCollisionError: If two contributors produce the same path
        InvalidPathError: If a key produces a malformed path
    """
    options = options or SerializerOptions()
    indent = options.indent
    tree = FileTree()

    if pack.icon is not None:
        tree.add(PACK_ICON, pack.icon, origin="pack icon")
    if not pack.metadata.is_empty():
        tree.add(PACK_METADATA, _json_writable(write_metadata(pack.metadata), indent),
                 origin="pack metadata")

    json_resources = (
        pack.block_states(), pack.fonts(), pack.languages(), pack.models(),
        pack.sound_registries(),
    )
    for resources in json_resources:
        for resource in resources:
            tree.add(resource.path(), _json_writable(resource.to_json(), indent),
                     origin=resource.describe())

    for sound in pack.sounds():
        tree.add(sound.path(), sound.data, origin=sound.describe())

    for texture in pack.textures():
        tree.add(texture.path(), texture.data, origin=texture.describe())
        if not texture.meta.is_empty():
            tree.add(texture.meta_path(), _json_writable(write_metadata(texture.meta), indent),
                     origin=f"texture metadata {texture.key}")

    for text in pack.texts():
        tree.add(text.path(), Writable.from_string(text.content), origin=text.describe())

    for path, data in pack.extra_files().items():
        tree.add(path, data, origin=f"extra file {path}")

    logger.debug("Serialized pack to %d files", len(tree))
    return tree


# ---------------------------------------------------------------------------
# Reverse
# ---------------------------------------------------------------------------

_JSON_DECODERS = {
    Kind.BLOCK_STATE: (BlockState.from_json, ResourcePack.add_block_state),
    Kind.FONT: (Font.from_json, ResourcePack.add_font),
    Kind.LANGUAGE: (Language.from_json, ResourcePack.add_language),
    Kind.MODEL: (Model.from_json, ResourcePack.add_model),
}


class _Reader:
    """Decodes the files of one tree into a fresh pack."""

    def __init__(self, tree: Mapping[str, Writable], options: SerializerOptions):
        self.tree = tree
        self.options = options
        self.pack = ResourcePack()
        self.errors: List[ResourceDecodeError] = []

    def fail(self, path: str, cause: Exception) -> None:
        error = ResourceDecodeError(path, cause)
        if not self.options.lenient:
            raise error from cause
        logger.warning("%s", error)
        self.errors.append(error)

    def read_metadata(self, path: str) -> Metadata:
        node = parse_string(self.tree[path].to_bytes())
        return read_metadata(node, self.options.parts, self.options.unknown_metadata)

    def read(self) -> ResourcePack:
        texture_metas: List[Tuple[str, Key]] = []

        for path in self.tree:
            if path == PACK_ICON:
                self.pack.set_icon(self.tree[path])
                continue
            if path == PACK_METADATA:
                try:
                    for part in self.read_metadata(path):
                        self.pack.add_meta_part(part)
                except (PackError, ValueError, TypeError) as e:
                    self.fail(path, e)
                continue

            match = classify(path)
            if match is None:
                self.pack.add_file(path, self.tree[path])
                continue
            kind, key = match
            if kind is Kind.TEXTURE_META:
                # attached once every texture has been read
                texture_metas.append((path, key))
                continue
            try:
                self.read_resource(path, kind, key)
            except (PackError, ValueError, TypeError) as e:
                self.fail(path, e)

        for path, key in texture_metas:
            texture = self.pack.texture(key)
            if texture is None:
                self.pack.add_file(path, self.tree[path])
                continue
            try:
                self.pack.add_texture(texture.with_meta(self.read_metadata(path)))
            except (PackError, ValueError, TypeError) as e:
                self.fail(path, e)

        return self.pack

    def read_resource(self, path: str, kind: Kind, key: Key) -> None:
        data = self.tree[path]
        if kind in _JSON_DECODERS:
            decode, add = _JSON_DECODERS[kind]
            add(self.pack, decode(key, parse_string(data.to_bytes())))
        elif kind is Kind.SOUND_REGISTRY:
            registry = SoundRegistry.from_json(key.namespace, parse_string(data.to_bytes()))
            self.pack.add_sound_registry(registry)
        elif kind is Kind.SOUND:
            self.pack.add_sound(SoundFile(key, data))
        elif kind is Kind.TEXTURE:
            self.pack.add_texture(Texture(key, data))
        elif kind is Kind.TEXT:
            self.pack.add_text(Text(key, data.to_string()))
        else:
            raise ValueError(f"No decoder for {kind.label}")


def deserialize(
    tree: Mapping[str, FileContent],
    options: Optional[SerializerOptions] = None,
) -> ResourcePack:
    """
    Read a pack from a file tree.

    Args:
        tree: FileTree, or any mapping of path to bytes/str/Writable
        options: Serializer settings (defaults if None)

    Returns:
        New ResourcePack

    Raises:
        ResourceDecodeError: In strict mode, for the first file that matches
            a resource kind but cannot be decoded
        ResourceDecodeErrors: In lenient mode, after every file was read, if
            any failed; its ``pack`` attribute holds the partial result
    """
    options = options or SerializerOptions()
    if not isinstance(tree, FileTree):
        tree = FileTree.from_dict(tree)

    reader = _Reader(tree, options)
    pack = reader.read()
    logger.debug("Read %d files into %r", len(tree), pack)
    if reader.errors:
        raise ResourceDecodeErrors(reader.errors, pack)
    return pack
