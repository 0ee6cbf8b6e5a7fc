"""Tests for capabilities."""

from __future__ import annotations

import dataclasses

import pytest

from layered_store._capabilities import Capability, CapabilitySet
from layered_store._errors import CapabilityNotSupported
from layered_store._operation import Operation


class TestCapabilityEnum:
    def test_members(self) -> None:
        expected = {"STAT", "LIST", "RECURSIVE_LIST", "READ", "WRITE", "DELETE", "CREATE_DIR", "COPY", "RENAME"}
        assert {c.name for c in Capability} == expected

    @pytest.mark.parametrize("op", list(Operation))
    def test_every_operation_has_a_capability(self, op: Operation) -> None:
        assert Capability(op.value).operation is op

    def test_recursive_list_enables_list(self) -> None:
        assert Capability.RECURSIVE_LIST.operation is Operation.LIST


class TestCapabilitySet:
    def test_construction(self) -> None:
        assert len(CapabilitySet({Capability.READ, Capability.WRITE})) == 2
        assert len(CapabilitySet()) == 0

    def test_all_and_without(self) -> None:
        full = CapabilitySet.all()
        assert set(full) == set(Capability)
        trimmed = full.without(Capability.CREATE_DIR, Capability.RENAME)
        assert Capability.CREATE_DIR not in trimmed
        assert Capability.RENAME not in trimmed
        assert len(trimmed) == len(Capability) - 2
        assert Capability.CREATE_DIR in full

    def test_supports(self) -> None:
        cs = CapabilitySet({Capability.READ})
        assert cs.supports(Capability.READ) is True
        assert cs.supports(Capability.WRITE) is False

    def test_require_passes(self) -> None:
        CapabilitySet({Capability.READ}).require(Capability.READ)

    def test_require_raises(self) -> None:
        cs = CapabilitySet({Capability.READ})
        with pytest.raises(CapabilityNotSupported) as exc_info:
            cs.require(Capability.WRITE, backend="test", path="a/b")
        err = exc_info.value
        assert err.capability == "write"
        assert err.backend == "test"
        assert err.operation is Operation.WRITE
        assert err.path == "a/b"
        assert "test cannot write" in err.message

    def test_require_recursive_list_labels_list(self) -> None:
        with pytest.raises(CapabilityNotSupported) as exc_info:
            CapabilitySet({Capability.LIST}).require(Capability.RECURSIVE_LIST, path="d/")
        err = exc_info.value
        assert err.operation is Operation.LIST
        assert err.capability == "recursive_list"
        assert "operation='list'" in str(err)

    def test_contains_and_iteration(self) -> None:
        caps = {Capability.READ, Capability.WRITE}
        cs = CapabilitySet(caps)
        assert Capability.READ in cs
        assert Capability.DELETE not in cs
        assert set(cs) == caps

    def test_equality_and_hash(self) -> None:
        assert CapabilitySet({Capability.LIST}) == CapabilitySet([Capability.LIST])
        assert CapabilitySet({Capability.LIST}) != CapabilitySet()
        assert hash(CapabilitySet({Capability.LIST})) == hash(CapabilitySet([Capability.LIST]))

    def test_repr_sorted(self) -> None:
        assert repr(CapabilitySet({Capability.WRITE, Capability.LIST})) == "CapabilitySet({LIST, WRITE})"

    def test_immutable(self) -> None:
        cs = CapabilitySet({Capability.READ})
        with pytest.raises(dataclasses.FrozenInstanceError):
            cs.members = frozenset()  # type: ignore[misc]
