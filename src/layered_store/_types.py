"""Type aliases used throughout layered_store."""

from __future__ import annotations

from typing import BinaryIO

WritableContent = BinaryIO | bytes
