"""Registry — accessor lifecycle management and operator access."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from layered_store._config import RegistryConfig
from layered_store._operator import Operator

if TYPE_CHECKING:
    from types import TracebackType

    from layered_store._accessor import Accessor
    from layered_store._layer import Layer

log = logging.getLogger(__name__)

# Global factory tables: service type strings to accessor classes, layer names to layer factories.
_SERVICE_FACTORIES: dict[str, type[Accessor]] = {}
_LAYER_FACTORIES: dict[str, Callable[[], Layer]] = {}


def register_service(type_name: str, cls: type[Accessor]) -> None:
    """Register an accessor class for a given service type string.

    :param type_name: The type identifier (e.g. ``"fs"``).
    :param cls: The accessor class to instantiate with the config options.
    """
    _SERVICE_FACTORIES[type_name] = cls


def register_layer(name: str, factory: Callable[[], Layer]) -> None:
    """Register a layer factory under ``name`` for use in operator profiles.

    :param name: The layer name referenced by ``OperatorProfile.layers``.
    :param factory: Zero-argument callable returning a ``Layer``.
    """
    _LAYER_FACTORIES[name] = factory


def _register_builtins() -> None:
    """Register the built-in services and layers."""
    from layered_store.layers._sanity_check import SanityCheckLayer
    from layered_store.services._fs import FsAccessor
    from layered_store.services._s3 import S3Accessor

    # s3fs itself is imported lazily, on first use of an S3Accessor.
    _SERVICE_FACTORIES.setdefault("fs", FsAccessor)
    _SERVICE_FACTORIES.setdefault("s3", S3Accessor)
    _LAYER_FACTORIES.setdefault("sanity_check", SanityCheckLayer)


class Registry:
    """Builds accessors from configuration and hands out layered operators.

    :param config: Optional configuration. Validates immediately.
    :raises ValueError: If config is invalid.
    """

    def __init__(self, config: RegistryConfig | None = None) -> None:
        _register_builtins()
        self._config = config or RegistryConfig()
        self._config.validate()
        self._accessors: dict[str, Accessor] = {}

    def __repr__(self) -> str:
        operators = sorted(self._config.operators.keys())
        return f"Registry(operators={operators!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Registry):
            return self._config == other._config
        return NotImplemented

    def __hash__(self) -> int:
        return id(self)

    def get_operator(self, name: str) -> Operator:
        """Get an operator by its profile name, with the profile's layers applied.

        :param name: The operator profile name.
        :raises KeyError: If no operator profile with this name exists.
        :raises ValueError: If the profile names an unregistered layer.
        """
        if name not in self._config.operators:
            available = sorted(self._config.operators.keys())
            raise KeyError(f"Unknown operator '{name}'. Available operators: {available}")

        profile = self._config.operators[name]
        op = Operator(self._get_accessor(profile.service))
        for layer_name in profile.layers:
            if layer_name not in _LAYER_FACTORIES:
                raise ValueError(
                    f"Unknown layer '{layer_name}' for operator '{name}'. "
                    f"Registered layers: {sorted(_LAYER_FACTORIES.keys())}"
                )
            log.debug("Applying layer %s to operator %s", layer_name, name)
            op = op.layer(_LAYER_FACTORIES[layer_name]())
        return op

    def _get_accessor(self, name: str) -> Accessor:
        """Lazily instantiate and cache an accessor."""
        if name not in self._accessors:
            cfg = self._config.services[name]
            if cfg.type not in _SERVICE_FACTORIES:
                raise ValueError(
                    f"Unknown service type '{cfg.type}'. Registered types: {sorted(_SERVICE_FACTORIES.keys())}"
                )
            factory = _SERVICE_FACTORIES[cfg.type]
            log.debug("Building %s accessor for service %s", cfg.type, name)
            try:
                self._accessors[name] = factory(**cfg.options)
            except TypeError as exc:
                raise ValueError(
                    f"Invalid options for service '{name}' (type={cfg.type!r}): {exc}. "
                    f"Provided options: {sorted(cfg.options.keys())}"
                ) from exc
        return self._accessors[name]

    def close(self) -> None:
        """Close all instantiated accessors."""
        for accessor in self._accessors.values():
            accessor.close()
        self._accessors.clear()

    def __enter__(self) -> Registry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
