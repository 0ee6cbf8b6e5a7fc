"""Local filesystem service — stdlib-only reference accessor."""

from __future__ import annotations

import errno
import io
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from layered_store._accessor import Accessor
from layered_store._capabilities import CapabilitySet
from layered_store._errors import AlreadyExists, InvalidPath, NotFound, PermissionDenied, StoreError
from layered_store._info import AccessorInfo
from layered_store._models import Entry, EntryMode, Metadata
from layered_store._path import is_directory_path, normalize_root

if TYPE_CHECKING:
    from collections.abc import Iterator

    from layered_store._ops import OpCopy, OpCreateDir, OpDelete, OpList, OpRead, OpRename, OpStat, OpWrite
    from layered_store._types import WritableContent

_ALL_CAPABILITIES = CapabilitySet.all()


class FsAccessor(Accessor):
    """Local filesystem accessor using only the Python standard library.

    :param root: Path to the root directory on the local filesystem. Created
        if missing.
    """

    def __init__(self, root: str) -> None:
        self._root = Path(root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._info = AccessorInfo(
            "fs",
            root=normalize_root(self._root.as_posix()),
            name=self._root.name,
            capabilities=_ALL_CAPABILITIES,
        )

    def __repr__(self) -> str:
        return f"FsAccessor(root={str(self._root)!r})"

    def info(self) -> AccessorInfo:
        return self._info

    # region: path safety
    def _resolve(self, path: str) -> Path:
        """Resolve an accessor path to an absolute path within root.

        ``.resolve()`` follows symlinks to their real target, and
        ``relative_to(self._root)`` then rejects any path that escapes the
        root, including symlinks pointing outside it.

        :raises InvalidPath: If the resolved path escapes the root.
        """
        if path == "/":
            return self._root
        resolved = (self._root / path).resolve()
        try:
            resolved.relative_to(self._root)
        except ValueError:
            raise InvalidPath(f"Path escapes root directory: {path}", path=path, backend="fs") from None
        return resolved

    def _rel(self, full: Path) -> str:
        """Accessor path of ``full``, with a trailing ``/`` for directories."""
        rel = full.relative_to(self._root).as_posix()
        if full.is_dir():
            return rel + "/"
        return rel

    # endregion

    # region: helpers
    @staticmethod
    def _read_content(content: WritableContent) -> bytes:
        if isinstance(content, bytes):
            return content
        return content.read()

    @staticmethod
    def _metadata(full: Path) -> Metadata:
        st = full.stat()
        modified = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
        if full.is_dir():
            return Metadata(mode=EntryMode.DIR, last_modified=modified)
        return Metadata(mode=EntryMode.FILE, content_length=st.st_size, last_modified=modified)

    # endregion

    # region: stat and list
    def stat(self, path: str, args: OpStat) -> Metadata:
        full = self._resolve(path)
        try:
            meta = self._metadata(full)
        except FileNotFoundError:
            raise NotFound(f"Not found: {path}", path=path, backend="fs") from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend="fs") from None
        if meta.is_dir != is_directory_path(path):
            raise NotFound(f"Not found: {path}", path=path, backend="fs")
        return meta

    def list(self, path: str, args: OpList) -> Iterator[Entry]:
        full = self._resolve(path)
        if not full.is_dir():
            return
        if args.recursive:
            items: Iterator[Path] = self._walk(full)
        else:
            try:
                items = iter(sorted(full.iterdir()))
            except PermissionError:
                raise PermissionDenied(f"Permission denied: {path}", path=path, backend="fs") from None
        for item in items:
            entry = self._entry(item)
            if entry is not None:
                yield entry

    def _walk(self, top: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(top):
            dirnames.sort()
            base = Path(dirpath)
            for name in dirnames:
                yield base / name
            for name in sorted(filenames):
                yield base / name

    def _entry(self, item: Path) -> Entry | None:
        """Entry for a listed item, or ``None`` if it vanished or is a dangling symlink."""
        try:
            meta = self._metadata(item)
        except FileNotFoundError:
            return None
        except PermissionError:
            rel = item.relative_to(self._root).as_posix()
            raise PermissionDenied(f"Permission denied: {rel}", path=rel, backend="fs") from None
        except OSError as exc:
            rel = item.relative_to(self._root).as_posix()
            raise StoreError(str(exc), path=rel, backend="fs") from None
        return Entry(self._rel(item), meta)

    # endregion

    # region: read and write
    def read(self, path: str, args: OpRead) -> BinaryIO:
        full = self._resolve(path)
        try:
            with full.open("rb") as fh:
                fh.seek(args.offset)
                data = fh.read() if args.size is None else fh.read(args.size)
        except (FileNotFoundError, IsADirectoryError):
            raise NotFound(f"File not found: {path}", path=path, backend="fs") from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend="fs") from None
        return io.BytesIO(data)

    def write(self, path: str, content: WritableContent, args: OpWrite) -> None:
        full = self._resolve(path)
        if not args.overwrite and full.exists():
            raise AlreadyExists(f"File already exists: {path}", path=path, backend="fs")
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            full.write_bytes(self._read_content(content))
        except IsADirectoryError:
            raise AlreadyExists(f"A directory already exists at: {path}", path=path, backend="fs") from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend="fs") from None

    # endregion

    # region: delete and create_dir
    def delete(self, path: str, args: OpDelete) -> None:
        full = self._resolve(path)
        try:
            if is_directory_path(path):
                full.rmdir()
            else:
                full.unlink()
        except FileNotFoundError:
            if not args.missing_ok:
                raise NotFound(f"Not found: {path}", path=path, backend="fs") from None
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend="fs") from None
        except OSError as exc:
            if exc.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise StoreError(f"Directory not empty: {path}", path=path, backend="fs") from None
            if exc.errno in (errno.ENOTDIR, errno.EISDIR):
                raise NotFound(f"Not found: {path}", path=path, backend="fs") from None
            raise StoreError(str(exc), path=path, backend="fs") from None

    def create_dir(self, path: str, args: OpCreateDir) -> None:
        full = self._resolve(path)
        if full.exists() and not full.is_dir():
            raise AlreadyExists(f"A file already exists at: {path}", path=path, backend="fs")
        try:
            full.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend="fs") from None

    # endregion

    # region: copy and rename
    def _check_transfer(self, src: str, dst: str, overwrite: bool) -> tuple[Path, Path]:
        src_full = self._resolve(src)
        dst_full = self._resolve(dst)
        if not src_full.is_file():
            raise NotFound(f"Source not found: {src}", path=src, backend="fs")
        if not overwrite and dst_full.exists():
            raise AlreadyExists(f"Destination already exists: {dst}", path=dst, backend="fs")
        return src_full, dst_full

    def copy(self, src: str, dst: str, args: OpCopy) -> None:
        src_full, dst_full = self._check_transfer(src, dst, args.overwrite)
        try:
            dst_full.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(str(src_full), str(dst_full))
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {src} -> {dst}", path=src, backend="fs") from None

    def rename(self, src: str, dst: str, args: OpRename) -> None:
        src_full, dst_full = self._check_transfer(src, dst, args.overwrite)
        try:
            dst_full.parent.mkdir(parents=True, exist_ok=True)
            os.replace(str(src_full), str(dst_full))
        except PermissionError:
            raise PermissionDenied(f"Permission denied: {src} -> {dst}", path=src, backend="fs") from None

    # endregion
