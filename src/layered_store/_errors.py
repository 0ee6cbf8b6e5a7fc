"""Normalized error hierarchy for layered_store."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, ClassVar, Optional

if TYPE_CHECKING:
    from layered_store._operation import Operation


class ErrorKind(enum.Enum):
    """Broad classification of a :class:`StoreError`."""

    UNEXPECTED = "unexpected"
    UNSUPPORTED = "unsupported"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    PERMISSION_DENIED = "permission_denied"
    INVALID_PATH = "invalid_path"
    IS_A_DIRECTORY = "is_a_directory"
    NOT_A_DIRECTORY = "not_a_directory"
    UNAVAILABLE = "unavailable"


class StoreError(Exception):
    """Base class for all layered_store errors.

    :param message: Human-readable error description.
    :param path: The path involved in the error, if any. Stored as the
        ``path`` context entry.
    :param backend: The backend scheme involved, if any.
    :param operation: The operation that failed, if known.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.UNEXPECTED

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[str] = None,
        backend: Optional[str] = None,
        operation: Optional[Operation] = None,
    ) -> None:
        self.backend = backend
        self.operation = operation
        self.context: dict[str, str] = {}
        if path is not None:
            self.context["path"] = path
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.args[0] if self.args else ""

    @property
    def path(self) -> Optional[str]:
        """The ``path`` context entry, if set."""
        return self.context.get("path")

    def with_operation(self, operation: Operation) -> StoreError:
        """Attach the failing operation and return ``self``."""
        self.operation = operation
        return self

    def with_context(self, key: str, value: str) -> StoreError:
        """Add a context entry and return ``self``."""
        self.context[key] = value
        return self

    def _details(self) -> list[str]:
        parts: list[str] = []
        if self.operation is not None:
            parts.append(f"operation={str(self.operation)!r}")
        parts.extend(f"{key}={value!r}" for key, value in self.context.items())
        if self.backend is not None:
            parts.append(f"backend={self.backend!r}")
        return parts

    def __str__(self) -> str:
        parts = [self.message, *self._details()]
        return " | ".join(parts) if len(parts) > 1 else parts[0]

    def __repr__(self) -> str:
        cls = type(self).__name__
        args = [repr(self.message), *self._details()]
        return f"{cls}({', '.join(args)})"


class Unexpected(StoreError):
    """Raised when a service breaks the contract it is expected to follow."""

    kind = ErrorKind.UNEXPECTED


class NotFound(StoreError):
    """Raised when a file or directory does not exist."""

    kind = ErrorKind.NOT_FOUND


class AlreadyExists(StoreError):
    """Raised when a target already exists and overwrite is not allowed."""

    kind = ErrorKind.ALREADY_EXISTS


class PermissionDenied(StoreError):
    """Raised when access is denied by the storage backend."""

    kind = ErrorKind.PERMISSION_DENIED


class InvalidPath(StoreError):
    """Raised for malformed, unsafe, or out-of-scope paths."""

    kind = ErrorKind.INVALID_PATH


class IsADirectory(StoreError):
    """Raised when a file operation targets a directory-shaped path."""

    kind = ErrorKind.IS_A_DIRECTORY


class NotADirectory(StoreError):
    """Raised when a directory operation targets a file-shaped path."""

    kind = ErrorKind.NOT_A_DIRECTORY


class CapabilityNotSupported(StoreError):
    """Raised when an operation requires an unsupported capability.

    :param capability: The name of the unsupported capability.
    """

    kind = ErrorKind.UNSUPPORTED

    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[str] = None,
        backend: Optional[str] = None,
        operation: Optional[Operation] = None,
        capability: str = "",
    ) -> None:
        self.capability = capability
        super().__init__(message, path=path, backend=backend, operation=operation)

    def _details(self) -> list[str]:
        parts = super()._details()
        if self.capability:
            parts.append(f"capability={self.capability!r}")
        return parts


class BackendUnavailable(StoreError):
    """Raised when the backend cannot be reached or initialized."""

    kind = ErrorKind.UNAVAILABLE
