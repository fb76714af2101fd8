"""
Virtual file tree: the ordered ``path -> bytes`` mapping a pack serializes to.

File contents are :class:`Writable` sources, so building a tree does not
read textures or sounds; they are produced when a writer asks for them.
"""

import hashlib
from typing import Dict, Iterator, Mapping, Optional, Union

from respack.base import Writable
from respack.errors import PathCollisionError
from respack.paths import validate_path

FileContent = Union[Writable, bytes, bytearray, str]


def compute_sha256(data: bytes) -> str:
    """Compute SHA256 hash of bytes."""
    return hashlib.sha256(data).hexdigest()


class FileTree(Mapping[str, Writable]):
    """
    Ordered mapping of relative path to file content.

    Paths are unique: adding a path twice raises PathCollisionError naming
    both contributors.

    Example:
        >>> tree = FileTree()
        >>> tree.add("pack.mcmeta", b'{"pack": {}}', origin="pack metadata")
        >>> tree.read("pack.mcmeta")
        b'{"pack": {}}'
    """

    def __init__(self):
        self._files: Dict[str, Writable] = {}
        self._origins: Dict[str, str] = {}

    @classmethod
    def from_dict(cls, files: Mapping[str, FileContent]) -> "FileTree":
        """Build a tree from a plain mapping, in sorted path order."""
        tree = cls()
        for path in sorted(files):
            tree.add(path, files[path], origin=f"file {path}")
        return tree

    def add(self, path: str, data: FileContent, origin: Optional[str] = None) -> None:
        """
        Add a file.

        Args:
            path: Relative path inside the pack
            data: File content
            origin: Description of what produced the file, for error messages

        Raises:
            InvalidPathError: If the path is not a well-formed relative path
            PathCollisionError: If the path is already present
        """
        validate_path(path)
        origin = origin or f"file {path}"
        if path in self._files:
            raise PathCollisionError(path, self._origins[path], origin)
        self._files[path] = Writable.coerce(data)
        self._origins[path] = origin

    def read(self, path: str) -> bytes:
        return self._files[path].to_bytes()

    def origin(self, path: str) -> Optional[str]:
        return self._origins.get(path)

    def to_dict(self) -> Dict[str, bytes]:
        """Produce every file's bytes."""
        return {path: data.to_bytes() for path, data in self._files.items()}

    def checksums(self) -> Dict[str, str]:
        """SHA256 of every file, in sorted path order."""
        return {path: compute_sha256(self.read(path)) for path in sorted(self._files)}

    def checksum_text(self) -> str:
        """Checksums in ``sha256sum`` format (``<hash>  <path>`` per line)."""
        return "\n".join(f"{digest}  {path}" for path, digest in self.checksums().items())

    def info(self) -> Dict:
        """
        Get summary information about the tree.

        Returns:
            Dict with file list, per-file sizes and total size
        """
        files = []
        total_size = 0
        for path, data in self._files.items():
            size = len(data.to_bytes())
            files.append({"path": path, "size": size, "origin": self._origins[path]})
            total_size += size
        return {
            "file_count": len(files),
            "files": files,
            "total_size": total_size,
        }

    def __getitem__(self, path: str) -> Writable:
        return self._files[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"FileTree({len(self)} files)"
