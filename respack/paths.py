"""
Canonical file paths for every resource kind.

Namespaced resources live under ``assets/<namespace>/<directory>/<value>.<ext>``.
The directory/extension pair is fixed per kind, so two different kinds
never produce the same path for the same key.
"""

import re
from enum import Enum
from typing import Optional, Tuple

from respack.errors import InvalidPathError
from respack.key import Key, is_valid_namespace, is_valid_value

ASSETS_DIRECTORY = "assets"
PACK_ICON = "pack.png"
PACK_METADATA = "pack.mcmeta"
SOUND_REGISTRY_FILE = "sounds.json"

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")


class Kind(Enum):
    """Resource kind, with its directory and file extension."""

    BLOCK_STATE = ("blockstates", ".json")
    FONT = ("font", ".json")
    LANGUAGE = ("lang", ".json")
    MODEL = ("models", ".json")
    SOUND = ("sounds", ".ogg")
    SOUND_REGISTRY = ("", SOUND_REGISTRY_FILE)
    TEXTURE = ("textures", ".png")
    TEXTURE_META = ("textures", ".png.mcmeta")
    TEXT = ("texts", ".txt")

    @property
    def directory(self) -> str:
        return self.value[0]

    @property
    def extension(self) -> str:
        return self.value[1]

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", " ")


def path_for(kind: Kind, key: Key) -> str:
    """
    Get the canonical path of a resource.

    Args:
        kind: Resource kind
        key: Resource key (only the namespace is used for SOUND_REGISTRY)

    Returns:
        Relative path inside the pack

    Example:
        >>> path_for(Kind.MODEL, Key.of("mypack:item/ruby"))
        'assets/mypack/models/item/ruby.json'
    """
    if kind is Kind.SOUND_REGISTRY:
        return sound_registry_path(key.namespace)
    return f"{ASSETS_DIRECTORY}/{key.namespace}/{kind.directory}/{key.value}{kind.extension}"


def sound_registry_path(namespace: str) -> str:
    return f"{ASSETS_DIRECTORY}/{namespace}/{SOUND_REGISTRY_FILE}"


def validate_path(path: str) -> str:
    """
    Check that a path is a well-formed path relative to the pack root.

    Args:
        path: Forward-slash separated relative path

    Returns:
        The path, unchanged

    Raises:
        InvalidPathError: If the path is empty, absolute, uses backslashes,
            or contains empty, '.' or '..' segments
    """
    if not isinstance(path, str) or not path:
        raise InvalidPathError(str(path), "path is empty")
    if "\\" in path:
        raise InvalidPathError(path, "backslashes are not allowed")
    if path.startswith("/") or _DRIVE_PATTERN.match(path):
        raise InvalidPathError(path, "path must be relative")
    for segment in path.split("/"):
        if segment == "":
            raise InvalidPathError(path, "empty path segment")
        if segment in (".", ".."):
            raise InvalidPathError(path, f"'{segment}' segments are not allowed")
    return path


# Longest extensions first so ".png.mcmeta" wins over ".png"
_CLASSIFIABLE = sorted(
    (kind for kind in Kind if kind is not Kind.SOUND_REGISTRY),
    key=lambda kind: len(kind.extension),
    reverse=True,
)


def classify(path: str) -> Optional[Tuple[Kind, Key]]:
    """
    Find the resource kind and key a path belongs to.

    This is the inverse of :func:`path_for`.

    Returns:
        ``(kind, key)``, or None if the path does not follow any kind's
        convention (such files are kept as plain extra files)
    """
    parts = path.split("/", 3)
    if len(parts) < 3 or parts[0] != ASSETS_DIRECTORY:
        return None
    namespace = parts[1]
    if not is_valid_namespace(namespace):
        return None
    if len(parts) == 3:
        if parts[2] == SOUND_REGISTRY_FILE:
            return Kind.SOUND_REGISTRY, Key(namespace, "sounds")
        return None

    directory, rest = parts[2], parts[3]
    for kind in _CLASSIFIABLE:
        if kind.directory != directory or not rest.endswith(kind.extension):
            continue
        value = rest[: -len(kind.extension)]
        if not value or not is_valid_value(value):
            return None
        return kind, Key(namespace, value)
    return None
