"""Layer contract and the pass-through base for layered accessors."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, BinaryIO, TypeVar

from layered_store._accessor import Accessor

if TYPE_CHECKING:
    from collections.abc import Iterator

    from layered_store._info import AccessorInfo
    from layered_store._models import Entry, Metadata
    from layered_store._ops import OpCopy, OpCreateDir, OpDelete, OpList, OpRead, OpRename, OpStat, OpWrite
    from layered_store._types import WritableContent

T = TypeVar("T")


class Layer(abc.ABC):
    """Wraps an accessor into another accessor with the same surface."""

    @abc.abstractmethod
    def layer(self, inner: Accessor) -> Accessor:
        """Return a new accessor that delegates to ``inner``."""


class LayeredAccessor(Accessor):
    """Accessor that forwards every call to ``inner``.

    Concrete layers subclass this and override only the operations they
    intercept; arguments and results of everything else pass through as-is.

    :param inner: The accessor being wrapped.
    """

    def __init__(self, inner: Accessor) -> None:
        self._inner = inner

    @property
    def inner(self) -> Accessor:
        return self._inner

    def __repr__(self) -> str:
        return f"{type(self).__name__}(inner={self._inner!r})"

    def info(self) -> AccessorInfo:
        return self._inner.info()

    def stat(self, path: str, args: OpStat) -> Metadata:
        return self._inner.stat(path, args)

    def list(self, path: str, args: OpList) -> Iterator[Entry]:
        return self._inner.list(path, args)

    def read(self, path: str, args: OpRead) -> BinaryIO:
        return self._inner.read(path, args)

    def write(self, path: str, content: WritableContent, args: OpWrite) -> None:
        self._inner.write(path, content, args)

    def delete(self, path: str, args: OpDelete) -> None:
        self._inner.delete(path, args)

    def create_dir(self, path: str, args: OpCreateDir) -> None:
        self._inner.create_dir(path, args)

    def copy(self, src: str, dst: str, args: OpCopy) -> None:
        self._inner.copy(src, dst, args)

    def rename(self, src: str, dst: str, args: OpRename) -> None:
        self._inner.rename(src, dst, args)

    def close(self) -> None:
        self._inner.close()

    def unwrap(self, type_hint: type[T]) -> T:
        return self._inner.unwrap(type_hint)
