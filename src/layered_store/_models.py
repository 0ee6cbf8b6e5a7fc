"""Immutable metadata and listing models."""

from __future__ import annotations

import dataclasses
import enum
from typing import TYPE_CHECKING

from layered_store._path import get_basename

if TYPE_CHECKING:
    from datetime import datetime


class EntryMode(enum.Enum):
    """Declared kind of an entry.

    ``UNKNOWN`` means the service did not (or could not) classify it.
    """

    FILE = "file"
    DIR = "dir"
    UNKNOWN = "unknown"


@dataclasses.dataclass(frozen=True)
class Metadata:
    """Snapshot of an entry's metadata as reported by a service.

    :param mode: Declared entry mode.
    :param content_length: Size in bytes (``0`` for directories).
    :param last_modified: Last modification time, if known.
    :param etag: Optional entity tag or checksum.
    :param content_type: Optional MIME type.
    :param extra: Service-specific metadata.
    """

    mode: EntryMode
    content_length: int = 0
    last_modified: datetime | None = None
    etag: str | None = None
    content_type: str | None = None
    extra: dict[str, object] = dataclasses.field(default_factory=dict)

    @property
    def is_file(self) -> bool:
        return self.mode is EntryMode.FILE

    @property
    def is_dir(self) -> bool:
        return self.mode is EntryMode.DIR


@dataclasses.dataclass(frozen=True)
class Entry:
    """One item produced by a listing.

    :param path: Accessor-relative path; directories end with ``/``.
    :param metadata: Metadata reported alongside the entry.
    """

    path: str
    metadata: Metadata

    @property
    def mode(self) -> EntryMode:
        return self.metadata.mode

    @property
    def name(self) -> str:
        """Last path component, keeping the trailing ``/`` of directories."""
        return get_basename(self.path)
