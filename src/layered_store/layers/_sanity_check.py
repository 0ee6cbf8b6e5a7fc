"""Sanity-check layer — reject metadata whose mode disagrees with its path.

Services sometimes report a directory without the trailing ``/`` that marks
directory identity, a file whose path ends with ``/``, or an entry with no
mode at all. Higher layers (listing, recursive removal) rely on the path
shape, so this layer refuses such responses on ``stat`` and on every
``list`` entry and raises :class:`~layered_store.Unexpected` instead.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from layered_store._errors import Unexpected
from layered_store._layer import Layer, LayeredAccessor
from layered_store._models import EntryMode
from layered_store._operation import Operation
from layered_store._path import is_directory_path

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from layered_store._accessor import Accessor
    from layered_store._info import AccessorInfo
    from layered_store._models import Entry, Metadata
    from layered_store._ops import OpList, OpStat


def unexpected_response(
    info: AccessorInfo,
    op: Operation,
    target_path: str,
    context_path: str,
    detail: str,
) -> Unexpected:
    """Build the error raised for a malformed service response.

    ``context_path`` is recorded as ``list_path`` for listings (the directory
    being listed) and as ``context_path`` for every other operation.
    """
    err = Unexpected(
        f"service {info.scheme} returned an unexpected {op} response: {detail}",
        path=target_path,
        backend=info.scheme,
    ).with_operation(op)

    if op is Operation.LIST:
        err.with_context("list_path", context_path)
    else:
        err.with_context("context_path", context_path)
    return err


def check_path_mode(
    info: AccessorInfo,
    op: Operation,
    context_path: str,
    target_path: str,
    mode: EntryMode,
) -> None:
    """Check that ``mode`` agrees with the shape of ``target_path``.

    :raises Unexpected: If the mode is unknown, a directory lacks the
        trailing ``/``, or a file carries one.
    """
    if mode is EntryMode.UNKNOWN:
        raise unexpected_response(info, op, target_path, context_path, "metadata is missing an entry mode")
    if mode is EntryMode.DIR:
        if not is_directory_path(target_path):
            raise unexpected_response(
                info,
                op,
                target_path,
                context_path,
                f"path `{target_path}` was reported as a directory but does not end with `/`",
            )
    elif mode is EntryMode.FILE:
        if is_directory_path(target_path):
            raise unexpected_response(
                info,
                op,
                target_path,
                context_path,
                f"path `{target_path}` was reported as a file but ends with `/`",
            )


class SanityCheckLayer(Layer):
    """Guard an accessor against unexpected responses from its service.

    Example::

        op = Operator(FsAccessor(root="/data")).layer(SanityCheckLayer())
    """

    def layer(self, inner: Accessor) -> SanityCheckAccessor:
        return SanityCheckAccessor(inner)

    def __repr__(self) -> str:
        return "SanityCheckLayer()"


class SanityCheckAccessor(LayeredAccessor):
    """Accessor that validates ``stat`` results and ``list`` entries.

    The inner accessor's info is captured once, here, and returned by
    :meth:`info` for the lifetime of the wrapper.
    """

    def __init__(self, inner: Accessor) -> None:
        super().__init__(inner)
        self._info = inner.info()

    def info(self) -> AccessorInfo:
        return self._info

    def stat(self, path: str, args: OpStat) -> Metadata:
        meta = self._inner.stat(path, args)
        check_path_mode(self._info, Operation.STAT, path, path, meta.mode)
        return meta

    def list(self, path: str, args: OpList) -> SanityCheckLister:
        lister = self._inner.list(path, args)
        return SanityCheckLister(self._info, path, lister)


class ListerState(enum.Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class SanityCheckLister:
    """Iterator that checks each entry of an inner listing before yielding it.

    Once the inner iterator is exhausted the lister stays exhausted. Once an
    entry fails the check, or the inner iterator raises, the lister stays
    failed and re-raises that same error, with the traceback of its first
    raise, on every later ``next()``.

    :param info: Descriptor of the accessor being listed.
    :param list_path: The directory the listing was requested for.
    :param inner: The inner entry iterator.
    """

    def __init__(self, info: AccessorInfo, list_path: str, inner: Iterator[Entry]) -> None:
        self._info = info
        self._list_path = list_path
        self._inner = iter(inner)
        self._state = ListerState.ACTIVE
        self._error: Exception | None = None
        self._error_tb: TracebackType | None = None

    @property
    def list_path(self) -> str:
        return self._list_path

    @property
    def state(self) -> ListerState:
        return self._state

    def __iter__(self) -> SanityCheckLister:
        return self

    def __next__(self) -> Entry:
        if self._error is not None:
            raise self._error.with_traceback(self._error_tb)
        if self._state is ListerState.EXHAUSTED:
            raise StopIteration

        try:
            entry = next(self._inner)
        except StopIteration:
            self._state = ListerState.EXHAUSTED
            raise
        except Exception as exc:
            self._fail(exc)
            raise

        try:
            check_path_mode(self._info, Operation.LIST, self._list_path, entry.path, entry.mode)
        except Unexpected as exc:
            self._fail(exc)
            raise
        return entry

    def _fail(self, exc: Exception) -> None:
        self._state = ListerState.FAILED
        self._error = exc
        self._error_tb = exc.__traceback__

    def close(self) -> None:
        """Close the inner iterator if it supports closing."""
        close = getattr(self._inner, "close", None)
        if close is not None:
            close()
