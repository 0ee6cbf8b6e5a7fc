"""Service implementations."""

from layered_store.services._fs import FsAccessor
from layered_store.services._s3 import S3Accessor

__all__ = ["FsAccessor", "S3Accessor"]
