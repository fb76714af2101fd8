"""
Keyed collections of resources, one per resource kind.

Putting a resource whose key is already present replaces it, unless the
caller asks for insert-or-fail with ``replace=False``.
"""

from typing import Callable, Dict, Generic, Hashable, Iterator, List, Optional, TypeVar

from respack.errors import DuplicateResourceError

T = TypeVar("T")


class ResourceRegistry(Generic[T]):
    """
    Resources of one kind keyed by their identifier.

    Args:
        label: Kind name used in error messages (e.g. "model")
        key_of: Function returning a resource's key (defaults to ``.key``)

    Example:
        >>> models = ResourceRegistry("model")
        >>> models.put(Model(Key.of("item/ruby")))
        >>> models.get(Key.of("item/ruby")) is not None
        True
    """

    def __init__(self, label: str, key_of: Optional[Callable[[T], Hashable]] = None):
        self.label = label
        self._key_of = key_of or (lambda resource: resource.key)
        self._entries: Dict[Hashable, T] = {}

    def put(self, resource: T, replace: bool = True) -> T:
        key = self._key_of(resource)
        if not replace and key in self._entries:
            raise DuplicateResourceError(self.label, key)
        self._entries[key] = resource
        return resource

    def get(self, key: Hashable) -> Optional[T]:
        return self._entries.get(key)

    def remove(self, key: Hashable) -> Optional[T]:
        return self._entries.pop(key, None)

    def all(self) -> List[T]:
        """All resources, sorted by key."""
        return [self._entries[key] for key in sorted(self._entries)]

    def keys(self) -> List[Hashable]:
        return sorted(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceRegistry):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"ResourceRegistry({self.label!r}, {len(self)} entries)"
