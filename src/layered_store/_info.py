"""AccessorInfo — descriptor shared by an accessor and the layers around it."""

from __future__ import annotations

from layered_store._capabilities import CapabilitySet


class AccessorInfo:
    """Describes one accessor instance.

    Services fill it in while they are being constructed; afterwards it is
    handed out by ``info()`` and treated as read-only. Layers keep the object
    they received, so every layer in a stack answers with the same instance.

    :param scheme: Short backend identifier (e.g. ``"fs"``, ``"s3"``).
    :param root: Normalized root, ``/``-terminated.
    :param name: Backend-specific label (bucket, root directory, ...).
    :param capabilities: Declared capabilities.
    """

    __slots__ = ("_scheme", "_root", "_name", "_capabilities")

    def __init__(
        self,
        scheme: str = "",
        *,
        root: str = "/",
        name: str = "",
        capabilities: CapabilitySet | None = None,
    ) -> None:
        self._scheme = scheme
        self._root = root
        self._name = name
        self._capabilities = capabilities if capabilities is not None else CapabilitySet()

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def root(self) -> str:
        return self._root

    @property
    def name(self) -> str:
        return self._name

    @property
    def capabilities(self) -> CapabilitySet:
        return self._capabilities

    def set_scheme(self, scheme: str) -> AccessorInfo:
        self._scheme = scheme
        return self

    def set_root(self, root: str) -> AccessorInfo:
        self._root = root
        return self

    def set_name(self, name: str) -> AccessorInfo:
        self._name = name
        return self

    def set_capabilities(self, capabilities: CapabilitySet) -> AccessorInfo:
        self._capabilities = capabilities
        return self

    def __repr__(self) -> str:
        return f"AccessorInfo(scheme={self._scheme!r}, root={self._root!r}, name={self._name!r})"
