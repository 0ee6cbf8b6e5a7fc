"""Operator — the primary user-facing abstraction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, BinaryIO

from layered_store._capabilities import Capability
from layered_store._errors import IsADirectory, NotADirectory, NotFound
from layered_store._ops import OpCopy, OpCreateDir, OpDelete, OpList, OpRead, OpRename, OpStat, OpWrite
from layered_store._path import is_directory_path, normalize_path

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from layered_store._accessor import Accessor
    from layered_store._info import AccessorInfo
    from layered_store._layer import Layer
    from layered_store._models import Entry, Metadata
    from layered_store._types import WritableContent

log = logging.getLogger(__name__)


class Operator:
    """Facade over a (possibly layered) accessor.

    All path arguments are normalized and checked against the accessor's
    declared capabilities before being delegated.

    :param accessor: The accessor to delegate I/O to.
    """

    def __init__(self, accessor: Accessor) -> None:
        self._accessor = accessor

    def __repr__(self) -> str:
        info = self._accessor.info()
        return f"Operator(scheme={info.scheme!r}, root={info.root!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Operator):
            return self._accessor is other._accessor
        return NotImplemented

    def __hash__(self) -> int:
        return id(self._accessor)

    @property
    def accessor(self) -> Accessor:
        return self._accessor

    def info(self) -> AccessorInfo:
        return self._accessor.info()

    def layer(self, layer: Layer) -> Operator:
        """Return a new operator over ``layer`` applied to this accessor."""
        return Operator(layer.layer(self._accessor))

    def close(self) -> None:
        """Close the underlying accessor, releasing any held resources."""
        self._accessor.close()

    def __enter__(self) -> Operator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def _require(self, cap: Capability, path: str) -> None:
        info = self._accessor.info()
        info.capabilities.require(cap, backend=info.scheme, path=path)

    @staticmethod
    def _file_path(path: str) -> str:
        """Normalize a path that must name a file."""
        normalized = normalize_path(path)
        if is_directory_path(normalized):
            raise IsADirectory(f"Expected a file path, got directory path {normalized!r}", path=normalized)
        return normalized

    @staticmethod
    def _dir_path(path: str) -> str:
        """Normalize a path that must name a directory."""
        normalized = normalize_path(path)
        if not is_directory_path(normalized):
            raise NotADirectory(
                f"Expected a directory path ending with '/', got {normalized!r}",
                path=normalized,
            )
        return normalized

    def supports(self, capability: Capability) -> bool:
        """Check whether the accessor supports a capability."""
        return self._accessor.info().capabilities.supports(capability)

    def stat(self, path: str) -> Metadata:
        """Get metadata for a file (``"a/b"``) or a directory (``"a/b/"``).

        :raises NotFound: If the entry does not exist.
        """
        normalized = normalize_path(path)
        self._require(Capability.STAT, normalized)
        return self._accessor.stat(normalized, OpStat())

    def exists(self, path: str) -> bool:
        """Check if a file or directory exists."""
        try:
            self.stat(path)
        except NotFound:
            return False
        return True

    def list(self, path: str, *, recursive: bool = False) -> Iterator[Entry]:
        """Lazily list entries under a directory.

        :param recursive: Include entries in all subdirectories.
        :raises NotADirectory: If ``path`` does not end with ``/``.
        """
        dir_path = self._dir_path(path)
        self._require(Capability.LIST, dir_path)
        if recursive:
            self._require(Capability.RECURSIVE_LIST, dir_path)
        return self._accessor.list(dir_path, OpList(recursive=recursive))

    def read(self, path: str) -> BinaryIO:
        """Open a file for reading.

        :raises NotFound: If the file does not exist.
        """
        file_path = self._file_path(path)
        self._require(Capability.READ, file_path)
        return self._accessor.read(file_path, OpRead())

    def read_bytes(self, path: str, *, offset: int = 0, size: int | None = None) -> bytes:
        """Read file content as bytes, optionally a byte range.

        :raises NotFound: If the file does not exist.
        """
        file_path = self._file_path(path)
        self._require(Capability.READ, file_path)
        stream = self._accessor.read(file_path, OpRead(offset=offset, size=size))
        try:
            return stream.read()
        finally:
            stream.close()

    def write(self, path: str, content: WritableContent, *, overwrite: bool = False) -> None:
        """Write content to a file.

        :raises AlreadyExists: If the file exists and ``overwrite`` is ``False``.
        :raises IsADirectory: If ``path`` ends with ``/``.
        """
        file_path = self._file_path(path)
        self._require(Capability.WRITE, file_path)
        self._accessor.write(file_path, content, OpWrite(overwrite=overwrite))

    def delete(self, path: str, *, missing_ok: bool = False) -> None:
        """Delete a file, or an empty directory when ``path`` ends with ``/``.

        :raises NotFound: If the path is missing and ``missing_ok`` is ``False``.
        """
        normalized = normalize_path(path)
        self._require(Capability.DELETE, normalized)
        self._accessor.delete(normalized, OpDelete(missing_ok=missing_ok))

    def create_dir(self, path: str) -> None:
        """Create a directory and any missing parents.

        :raises NotADirectory: If ``path`` does not end with ``/``.
        """
        dir_path = self._dir_path(path)
        self._require(Capability.CREATE_DIR, dir_path)
        self._accessor.create_dir(dir_path, OpCreateDir())

    def copy(self, src: str, dst: str, *, overwrite: bool = False) -> None:
        """Copy a file.

        :raises NotFound: If ``src`` does not exist.
        :raises AlreadyExists: If ``dst`` exists and ``overwrite`` is ``False``.
        """
        src_path, dst_path = self._file_path(src), self._file_path(dst)
        self._require(Capability.COPY, src_path)
        self._accessor.copy(src_path, dst_path, OpCopy(overwrite=overwrite))

    def rename(self, src: str, dst: str, *, overwrite: bool = False) -> None:
        """Move/rename a file.

        :raises NotFound: If ``src`` does not exist.
        :raises AlreadyExists: If ``dst`` exists and ``overwrite`` is ``False``.
        """
        src_path, dst_path = self._file_path(src), self._file_path(dst)
        self._require(Capability.RENAME, src_path)
        self._accessor.rename(src_path, dst_path, OpRename(overwrite=overwrite))

    def remove_all(self, path: str) -> None:
        """Remove a file, or a directory and everything below it.

        Entries are classified by their path shape, so listing results must
        carry trailing ``/`` on directories (see ``SanityCheckLayer``).
        """
        normalized = normalize_path(path)
        self._require(Capability.DELETE, normalized)
        if not is_directory_path(normalized):
            self._accessor.delete(normalized, OpDelete(missing_ok=True))
            return

        self._require(Capability.LIST, normalized)
        self._require(Capability.RECURSIVE_LIST, normalized)
        dirs: list[str] = []
        for entry in self._accessor.list(normalized, OpList(recursive=True)):
            if is_directory_path(entry.path):
                dirs.append(entry.path)
                continue
            log.debug("Removing file %s", entry.path)
            self._accessor.delete(entry.path, OpDelete(missing_ok=True))

        # Deepest first so every directory is empty when it is removed.
        for dir_path in sorted(dirs, key=lambda p: p.count("/"), reverse=True):
            log.debug("Removing directory %s", dir_path)
            self._accessor.delete(dir_path, OpDelete(missing_ok=True))
        if normalized != "/":
            self._accessor.delete(normalized, OpDelete(missing_ok=True))
