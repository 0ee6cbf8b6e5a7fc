"""Path helpers — shape predicate and normalization for accessor paths.

Accessor paths are relative to the accessor root and use ``/`` as the only
separator. A trailing ``/`` is what makes a path a directory; the root is
spelled ``"/"``.
"""

from __future__ import annotations

from layered_store._errors import InvalidPath


def is_directory_path(path: str) -> bool:
    """Return ``True`` if ``path`` is ``"/"`` or ends with ``/``.

    No normalization is applied: ``"a//"`` is a directory, ``"a\\"`` is not.
    """
    return path == "/" or path.endswith("/")


def _segments(raw: str) -> list[str]:
    if "\0" in raw:
        raise InvalidPath("Path contains null byte", path=raw)
    parts: list[str] = []
    for segment in raw.split("/"):
        if segment == "" or segment == ".":
            continue
        if segment == "..":
            raise InvalidPath("Path contains '..' segment", path=raw)
        parts.append(segment)
    return parts


def normalize_path(raw: str) -> str:
    """Normalize a user-supplied path into accessor form.

    Leading slashes, empty segments and ``.`` segments are dropped and a
    trailing ``/`` is kept. An empty result becomes the root ``"/"``.

    :raises InvalidPath: If the path holds a null byte or a ``..`` segment.
    """
    parts = _segments(raw)
    if not parts:
        return "/"
    normalized = "/".join(parts)
    if raw.endswith("/"):
        normalized += "/"
    return normalized


def normalize_root(raw: str) -> str:
    """Normalize an accessor root to ``/a/b/`` form (``"/"`` when empty)."""
    parts = _segments(raw)
    if not parts:
        return "/"
    return "/" + "/".join(parts) + "/"


def get_basename(path: str) -> str:
    """Final component of ``path``, keeping the trailing ``/`` of directories."""
    if path == "/":
        return "/"
    if path.endswith("/"):
        return path[:-1].rsplit("/", 1)[-1] + "/"
    return path.rsplit("/", 1)[-1]
