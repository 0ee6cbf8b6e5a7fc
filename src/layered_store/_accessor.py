"""Accessor abstract base class — the contract every service implements."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, BinaryIO, TypeVar

from layered_store._capabilities import Capability, CapabilitySet
from layered_store._errors import CapabilityNotSupported

if TYPE_CHECKING:
    from collections.abc import Iterator

    from layered_store._info import AccessorInfo
    from layered_store._models import Entry, Metadata
    from layered_store._ops import OpCopy, OpCreateDir, OpDelete, OpList, OpRead, OpRename, OpStat, OpWrite
    from layered_store._types import WritableContent

T = TypeVar("T")


class Accessor(abc.ABC):
    """Abstract base class for all storage services and layers.

    Paths received here are already normalized: relative to the accessor
    root, ``"/"`` for the root itself, and ``/``-terminated for directories.
    Service-native exceptions must never leak; they must be mapped to
    ``layered_store`` errors.
    """

    @abc.abstractmethod
    def info(self) -> AccessorInfo:
        """Descriptor of this accessor. Must return the same object every call."""

    @abc.abstractmethod
    def stat(self, path: str, args: OpStat) -> Metadata:
        """Fetch metadata for a single entry.

        A directory-shaped ``path`` naming a file, or a file-shaped ``path``
        naming a directory, is reported as missing.

        :raises NotFound: If the entry does not exist.
        """

    @abc.abstractmethod
    def list(self, path: str, args: OpList) -> Iterator[Entry]:
        """Lazily list the entries under the directory ``path``.

        Directory entries carry a trailing ``/``. The listed directory itself
        is not yielded. A missing directory yields nothing.
        """

    @abc.abstractmethod
    def read(self, path: str, args: OpRead) -> BinaryIO:
        """Open a file for reading and return a binary stream.

        :raises NotFound: If the file does not exist.
        """

    @abc.abstractmethod
    def write(self, path: str, content: WritableContent, args: OpWrite) -> None:
        """Write content to a file, creating parent directories as needed.

        :raises AlreadyExists: If the file exists and ``args.overwrite`` is ``False``.
        """

    @abc.abstractmethod
    def delete(self, path: str, args: OpDelete) -> None:
        """Delete a file, or an empty directory when ``path`` is directory-shaped.

        :raises NotFound: If the path is missing and ``args.missing_ok`` is ``False``.
        """

    def create_dir(self, path: str, args: OpCreateDir) -> None:
        """Create a directory and its parents.

        :raises CapabilityNotSupported: Unless the service overrides it.
        """
        self._refuse(Capability.CREATE_DIR, path)

    def copy(self, src: str, dst: str, args: OpCopy) -> None:
        """Copy a file.

        :raises CapabilityNotSupported: Unless the service overrides it.
        """
        self._refuse(Capability.COPY, src)

    def rename(self, src: str, dst: str, args: OpRename) -> None:
        """Move/rename a file.

        :raises CapabilityNotSupported: Unless the service overrides it.
        """
        self._refuse(Capability.RENAME, src)

    def close(self) -> None:  # noqa: B027
        """Release resources. Default is a no-op."""

    def unwrap(self, type_hint: type[T]) -> T:
        """Return the native handle if it matches the requested type.

        :param type_hint: The expected type (e.g., ``s3fs.S3FileSystem``).
        :raises CapabilityNotSupported: If the accessor cannot provide the requested type.
        """
        scheme = self.info().scheme
        raise CapabilityNotSupported(
            f"Accessor '{scheme}' does not expose native handle of type {type_hint.__name__}. "
            f"Override unwrap() in your accessor to provide native access.",
            capability="unwrap",
            backend=scheme,
        )

    def _refuse(self, cap: Capability, path: str) -> None:
        """Raise the error for an operation this accessor does not implement."""
        CapabilitySet().require(cap, backend=self.info().scheme, path=path)
