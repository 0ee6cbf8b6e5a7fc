"""Configuration model — immutable data containers describing services and operators."""

from __future__ import annotations

import dataclasses

DEFAULT_LAYERS: tuple[str, ...] = ("sanity_check",)


@dataclasses.dataclass(frozen=True)
class ServiceConfig:
    """Describes a service (accessor) instance.

    :param type: Service type identifier (e.g. ``"fs"``, ``"s3"``).
    :param options: Keyword arguments for the service constructor.
    """

    type: str
    options: dict[str, object] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class OperatorProfile:
    """Describes a named operator.

    :param service: Name of the service config to use.
    :param layers: Names of layers to apply, innermost first.
    """

    service: str
    layers: tuple[str, ...] = DEFAULT_LAYERS


@dataclasses.dataclass(frozen=True)
class RegistryConfig:
    """Top-level configuration container.

    :param services: Mapping of service names to their configs.
    :param operators: Mapping of operator names to their profiles.
    """

    services: dict[str, ServiceConfig] = dataclasses.field(default_factory=dict)
    operators: dict[str, OperatorProfile] = dataclasses.field(default_factory=dict)

    def validate(self) -> None:
        """Validate that all operator profiles reference existing services.

        :raises ValueError: If a profile references a non-existent service.
        """
        for op_name, profile in self.operators.items():
            if profile.service not in self.services:
                raise ValueError(
                    f"Operator '{op_name}' references unknown service '{profile.service}'. "
                    f"Available services: {sorted(self.services.keys())}"
                )

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> RegistryConfig:
        """Construct from a plain dict (e.g. parsed TOML/JSON).

        :param data: Dict with ``services`` and ``operators`` keys.
        """
        raw_services = data.get("services", {})
        raw_operators = data.get("operators", {})
        if not isinstance(raw_services, dict) or not isinstance(raw_operators, dict):
            msg = "Expected 'services' and 'operators' to be dicts"
            raise TypeError(msg)

        services: dict[str, ServiceConfig] = {}
        for name, cfg in raw_services.items():
            if not isinstance(cfg, dict):
                msg = f"Service config for '{name}' must be a dict"
                raise TypeError(msg)
            services[str(name)] = ServiceConfig(
                type=str(cfg["type"]),
                options=dict(cfg.get("options", {})),
            )

        operators: dict[str, OperatorProfile] = {}
        for name, prof in raw_operators.items():
            if not isinstance(prof, dict):
                msg = f"Operator profile for '{name}' must be a dict"
                raise TypeError(msg)
            layers = prof.get("layers", DEFAULT_LAYERS)
            if isinstance(layers, str) or not isinstance(layers, (list, tuple)):
                msg = f"'layers' for operator '{name}' must be a list of layer names"
                raise TypeError(msg)
            operators[str(name)] = OperatorProfile(
                service=str(prof["service"]),
                layers=tuple(str(layer) for layer in layers),
            )

        return cls(services=services, operators=operators)
