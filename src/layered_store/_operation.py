"""Operation enum — the kinds of calls an accessor answers."""

from __future__ import annotations

import enum


class Operation(enum.Enum):
    """Accessor operations, used to label errors.

    ``str(op)`` gives the display form used in messages, e.g. ``"stat"``.
    """

    STAT = "stat"
    LIST = "list"
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    COPY = "copy"
    RENAME = "rename"
    CREATE_DIR = "create_dir"

    def __str__(self) -> str:
        return self.value
