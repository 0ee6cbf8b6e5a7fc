"""Shared test fixtures and marker registration."""

from __future__ import annotations

import tempfile
from typing import TYPE_CHECKING

import pytest

from layered_store._info import AccessorInfo
from layered_store.services._fs import FsAccessor
from tests.stubs import StubAccessor

if TYPE_CHECKING:
    from collections.abc import Iterator


def pytest_configure(config: object) -> None:
    """Register custom markers."""
    if isinstance(config, pytest.Config):
        config.addinivalue_line("markers", "integration: requires external services")


@pytest.fixture
def test_info() -> AccessorInfo:
    """Accessor info with scheme ``test``."""
    return AccessorInfo("test")


@pytest.fixture
def stub() -> StubAccessor:
    return StubAccessor()


@pytest.fixture
def fs_accessor() -> Iterator[FsAccessor]:
    with tempfile.TemporaryDirectory() as tmp:
        yield FsAccessor(root=tmp)
