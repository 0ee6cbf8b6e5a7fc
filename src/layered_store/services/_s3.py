"""S3-compatible object storage service using s3fs."""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, BinaryIO, TypeVar

from layered_store._accessor import Accessor
from layered_store._capabilities import Capability, CapabilitySet
from layered_store._errors import (
    AlreadyExists,
    BackendUnavailable,
    CapabilityNotSupported,
    NotFound,
    PermissionDenied,
    StoreError,
)
from layered_store._info import AccessorInfo
from layered_store._models import Entry, EntryMode, Metadata
from layered_store._path import is_directory_path, normalize_root

if TYPE_CHECKING:
    from collections.abc import Iterator

    from layered_store._ops import OpCopy, OpDelete, OpList, OpRead, OpRename, OpStat, OpWrite
    from layered_store._types import WritableContent

T = TypeVar("T")

log = logging.getLogger(__name__)

# Prefixes are virtual on S3, so there is nothing to create.
_S3_CAPABILITIES = CapabilitySet.all().without(Capability.CREATE_DIR)


class S3Accessor(Accessor):
    """S3-compatible object storage accessor using s3fs.

    s3fs reports prefixes as ``directory`` entries without a trailing
    slash; this accessor appends one so paths keep their directory shape.

    :param bucket: S3 bucket name (required, non-empty).
    :param root: Key prefix all paths are relative to.
    :param endpoint_url: Custom endpoint URL (e.g. for MinIO).
    :param key: AWS access key ID.
    :param secret: AWS secret access key.
    :param region_name: AWS region name.
    :param client_options: Additional options passed to s3fs.
    """

    def __init__(
        self,
        bucket: str,
        *,
        root: str = "",
        endpoint_url: str | None = None,
        key: str | None = None,
        secret: str | None = None,
        region_name: str | None = None,
        client_options: dict[str, Any] | None = None,
    ) -> None:
        if not bucket or not bucket.strip():
            raise ValueError("bucket must be a non-empty string")
        self._bucket = bucket
        self._root = normalize_root(root)
        self._endpoint_url = endpoint_url
        self._key = key
        self._secret = secret
        self._region_name = region_name
        self._client_options = client_options or {}
        self._fs_instance: Any = None
        self._info = AccessorInfo("s3", root=self._root, name=bucket, capabilities=_S3_CAPABILITIES)

    def __repr__(self) -> str:
        return f"S3Accessor(bucket={self._bucket!r}, root={self._root!r})"

    def info(self) -> AccessorInfo:
        return self._info

    # region: lazy filesystem

    @property
    def _fs(self) -> Any:
        if self._fs_instance is None:
            import s3fs  # type: ignore[import-untyped]

            opts: dict[str, Any] = dict(self._client_options)
            if self._endpoint_url is not None:
                opts["endpoint_url"] = self._endpoint_url
            if self._key is not None:
                opts["key"] = self._key
            if self._secret is not None:
                opts["secret"] = self._secret
            if self._region_name is not None:
                client_kwargs: dict[str, Any] = opts.setdefault("client_kwargs", {})
                client_kwargs["region_name"] = self._region_name
            opts.setdefault("anon", False)
            log.debug("Creating s3fs filesystem for bucket %s", self._bucket)
            self._fs_instance = s3fs.S3FileSystem(**opts)
        return self._fs_instance

    # endregion

    # region: path helpers

    def _s3_path(self, path: str) -> str:
        """Map an accessor path to a ``bucket/key`` string without trailing slash."""
        prefix = self._root.lstrip("/")
        key = "" if path == "/" else path
        return f"{self._bucket}/{prefix}{key}".rstrip("/")

    def _rel_path(self, s3_path: str, *, is_dir: bool) -> str:
        """Map an s3fs name back to an accessor path."""
        prefix = f"{self._bucket}/{self._root.lstrip('/')}"
        rel = s3_path[len(prefix) :] if s3_path.startswith(prefix) else s3_path
        rel = rel.strip("/")
        if is_dir:
            return rel + "/" if rel else "/"
        return rel

    # endregion

    # region: error mapping

    @contextmanager
    def _errors(self, path: str = "") -> Iterator[None]:
        """Map s3fs/botocore exceptions to layered_store errors."""
        try:
            yield
        except StoreError:
            raise
        except FileNotFoundError:
            raise NotFound(f"Not found: {path}", path=path, backend="s3") from None
        except PermissionError:  # pragma: no cover -- moto doesn't raise PermissionError
            raise PermissionDenied(f"Permission denied: {path}", path=path, backend="s3") from None
        except Exception as exc:  # pragma: no cover -- moto raises standard errors
            raise self._classify_error(exc, path) from None

    def _classify_error(self, exc: Exception, path: str) -> StoreError:  # pragma: no cover
        """Classify an unknown exception into a layered_store error type."""
        msg = str(exc).lower()
        if "404" in msg or "nosuchkey" in msg or "nosuchbucket" in msg or "not found" in msg:
            return NotFound(f"Not found: {path}", path=path, backend="s3")
        if "403" in msg or "accessdenied" in msg or "access denied" in msg:
            return PermissionDenied(f"Permission denied: {path}", path=path, backend="s3")
        if any(kw in msg for kw in ("endpoint", "connect", "timeout", "dns", "name or service")):
            return BackendUnavailable(str(exc), path=path, backend="s3")
        return StoreError(str(exc), path=path, backend="s3")

    # endregion

    # region: helpers

    @staticmethod
    def _read_content(content: WritableContent) -> bytes:
        if isinstance(content, bytes):
            return content
        return content.read()

    @staticmethod
    def _to_metadata(info: dict[str, Any]) -> Metadata:
        """Convert an s3fs info dict to Metadata."""
        if info.get("type") == "directory":
            return Metadata(mode=EntryMode.DIR)
        size = info.get("size", info.get("Size", 0)) or 0
        modified = info.get("LastModified", info.get("last_modified"))
        if isinstance(modified, str):
            modified = datetime.fromisoformat(modified)
        if modified is not None and modified.tzinfo is None:
            modified = modified.replace(tzinfo=timezone.utc)
        etag = info.get("ETag")
        return Metadata(
            mode=EntryMode.FILE,
            content_length=int(size),
            last_modified=modified,
            etag=etag.strip('"') if isinstance(etag, str) else None,
            content_type=info.get("ContentType"),
        )

    def _entry(self, info: dict[str, Any]) -> Entry:
        meta = self._to_metadata(info)
        return Entry(self._rel_path(info["name"], is_dir=meta.is_dir), meta)

    # endregion

    # region: stat and list

    def stat(self, path: str, args: OpStat) -> Metadata:
        if path == "/":
            return Metadata(mode=EntryMode.DIR)
        with self._errors(path):
            meta = self._to_metadata(self._fs.info(self._s3_path(path)))
        if meta.is_dir != is_directory_path(path):
            raise NotFound(f"Not found: {path}", path=path, backend="s3")
        return meta

    def list(self, path: str, args: OpList) -> Iterator[Entry]:
        s3_path = self._s3_path(path)
        with self._errors(path):
            if path != "/" and not self._fs.isdir(s3_path):
                return
            if args.recursive:
                infos: list[dict[str, Any]] = list(self._fs.find(s3_path, withdirs=True, detail=True).values())
            else:
                infos = self._fs.ls(s3_path, detail=True)
        for info in infos:
            entry = self._entry(info)
            # s3fs may report the listed prefix itself.
            if entry.path != path:
                yield entry

    # endregion

    # region: read and write

    def read(self, path: str, args: OpRead) -> BinaryIO:
        end = None if args.size is None else args.offset + args.size
        with self._errors(path):
            if args.size == 0:
                # cat_file treats an empty range as the whole object.
                if not self._fs.isfile(self._s3_path(path)):
                    raise NotFound(f"File not found: {path}", path=path, backend="s3")
                return io.BytesIO(b"")
            data = self._fs.cat_file(self._s3_path(path), start=args.offset or None, end=end)
            return io.BytesIO(data)

    def write(self, path: str, content: WritableContent, args: OpWrite) -> None:
        with self._errors(path):
            s3_path = self._s3_path(path)
            if not args.overwrite and self._fs.exists(s3_path):
                raise AlreadyExists(f"File already exists: {path}", path=path, backend="s3")
            self._fs.pipe_file(s3_path, self._read_content(content))

    # endregion

    # region: delete

    def delete(self, path: str, args: OpDelete) -> None:
        with self._errors(path):
            s3_path = self._s3_path(path)
            if is_directory_path(path):
                # Prefixes vanish with their last object; only refuse non-empty ones.
                if self._fs.isdir(s3_path):
                    if self._fs.ls(s3_path):
                        raise StoreError(f"Directory not empty: {path}", path=path, backend="s3")
                    return
                if not args.missing_ok:
                    raise NotFound(f"Directory not found: {path}", path=path, backend="s3")
                return
            if not self._fs.isfile(s3_path):
                if not args.missing_ok:
                    raise NotFound(f"File not found: {path}", path=path, backend="s3")
                return
            self._fs.rm_file(s3_path)

    # endregion

    # region: copy and rename

    def _check_transfer(self, src: str, dst: str, overwrite: bool) -> None:
        if not self._fs.isfile(self._s3_path(src)):
            raise NotFound(f"Source not found: {src}", path=src, backend="s3")
        if not overwrite and self._fs.exists(self._s3_path(dst)):
            raise AlreadyExists(f"Destination already exists: {dst}", path=dst, backend="s3")

    def copy(self, src: str, dst: str, args: OpCopy) -> None:
        with self._errors(src):
            self._check_transfer(src, dst, args.overwrite)
            self._fs.copy(self._s3_path(src), self._s3_path(dst))

    def rename(self, src: str, dst: str, args: OpRename) -> None:
        with self._errors(src):
            self._check_transfer(src, dst, args.overwrite)
            self._fs.copy(self._s3_path(src), self._s3_path(dst))
            self._fs.rm_file(self._s3_path(src))

    # endregion

    # region: lifecycle

    def close(self) -> None:
        if self._fs_instance is not None:
            self._fs_instance.clear_instance_cache()
            self._fs_instance = None

    def unwrap(self, type_hint: type[T]) -> T:
        import s3fs

        if type_hint is s3fs.S3FileSystem:
            return self._fs  # type: ignore[no-any-return]
        raise CapabilityNotSupported(
            f"Accessor 's3' does not expose native handle of type {type_hint.__name__}. "
            f"Override unwrap() in your accessor to provide native access.",
            capability="unwrap",
            backend="s3",
        )

    # endregion
