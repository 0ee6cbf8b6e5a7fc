"""Capabilities — which operations an accessor answers."""

from __future__ import annotations

import dataclasses
import enum
from typing import TYPE_CHECKING, Optional

from layered_store._errors import CapabilityNotSupported
from layered_store._operation import Operation

if TYPE_CHECKING:
    from collections.abc import Iterator


class Capability(enum.Enum):
    """An operation an accessor may answer.

    Each capability is named after the :class:`Operation` it enables;
    ``RECURSIVE_LIST`` refines ``LIST``.
    """

    STAT = "stat"
    LIST = "list"
    RECURSIVE_LIST = "recursive_list"
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    CREATE_DIR = "create_dir"
    COPY = "copy"
    RENAME = "rename"

    @property
    def operation(self) -> Operation:
        """The operation this capability enables."""
        if self is Capability.RECURSIVE_LIST:
            return Operation.LIST
        return Operation(self.value)


@dataclasses.dataclass(frozen=True, repr=False)
class CapabilitySet:
    """Immutable set of capabilities declared by an accessor.

    :param members: The supported capabilities; any iterable is accepted.
    """

    members: frozenset[Capability] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", frozenset(self.members))

    @classmethod
    def all(cls) -> CapabilitySet:
        """A set holding every capability."""
        return cls(frozenset(Capability))

    def without(self, *caps: Capability) -> CapabilitySet:
        """Return a copy with ``caps`` removed."""
        return CapabilitySet(self.members.difference(caps))

    def supports(self, cap: Capability) -> bool:
        return cap in self.members

    def require(self, cap: Capability, *, backend: str = "", path: Optional[str] = None) -> None:
        """Raise unless ``cap`` is declared.

        The error is labelled with the operation ``cap`` enables and with
        ``path`` when given.

        :raises CapabilityNotSupported: If the capability is missing.
        """
        if cap in self.members:
            return
        raise CapabilityNotSupported(
            f"{backend or 'accessor'} cannot {cap.operation}: capability '{cap.value}' is not declared",
            path=path,
            backend=backend or None,
            operation=cap.operation,
            capability=cap.value,
        )

    def __contains__(self, cap: object) -> bool:
        return cap in self.members

    def __iter__(self) -> Iterator[Capability]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def __repr__(self) -> str:
        return "CapabilitySet({" + ", ".join(sorted(c.name for c in self.members)) + "})"

