"""Per-operation argument records passed from the operator to accessors.

Layers forward these objects untouched; only the accessor that finally
serves the call reads them.
"""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class OpStat:
    """Arguments for ``stat``. Currently carries no options."""


@dataclasses.dataclass(frozen=True)
class OpList:
    """Arguments for ``list``.

    :param recursive: Walk the whole subtree instead of one level.
    """

    recursive: bool = False


@dataclasses.dataclass(frozen=True)
class OpRead:
    """Arguments for ``read``.

    :param offset: Byte offset to start reading at.
    :param size: Maximum number of bytes to read, or ``None`` for all.
    """

    offset: int = 0
    size: int | None = None

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        if self.size is not None and self.size < 0:
            raise ValueError(f"size must be >= 0, got {self.size}")


@dataclasses.dataclass(frozen=True)
class OpWrite:
    """Arguments for ``write``.

    :param overwrite: If ``False``, refuse to replace an existing file.
    """

    overwrite: bool = False


@dataclasses.dataclass(frozen=True)
class OpDelete:
    """Arguments for ``delete``.

    :param missing_ok: If ``True``, deleting a missing path is not an error.
    """

    missing_ok: bool = False


@dataclasses.dataclass(frozen=True)
class OpCreateDir:
    """Arguments for ``create_dir``."""


@dataclasses.dataclass(frozen=True)
class OpCopy:
    overwrite: bool = False


@dataclasses.dataclass(frozen=True)
class OpRename:
    overwrite: bool = False
