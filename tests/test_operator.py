"""Tests for Operator: path handling, capability checks and delegation."""

from __future__ import annotations

import io
import tempfile
from typing import TYPE_CHECKING

import pytest

from layered_store._accessor import Accessor
from layered_store._capabilities import Capability, CapabilitySet
from layered_store._errors import (
    AlreadyExists,
    CapabilityNotSupported,
    InvalidPath,
    IsADirectory,
    NotADirectory,
    NotFound,
    Unexpected,
)
from layered_store._models import Entry, EntryMode, Metadata
from layered_store._operation import Operation
from layered_store._operator import Operator
from layered_store._ops import OpCreateDir, OpDelete, OpRename, OpStat
from layered_store.layers import SanityCheckAccessor, SanityCheckLayer
from layered_store.services._fs import FsAccessor
from tests.stubs import StubAccessor

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def op() -> Iterator[Operator]:
    with tempfile.TemporaryDirectory() as tmp:
        yield Operator(FsAccessor(root=tmp)).layer(SanityCheckLayer())


class TestOperatorConstruction:
    def test_repr(self, stub: StubAccessor) -> None:
        assert repr(Operator(stub)) == "Operator(scheme='test', root='/')"

    def test_equality_by_accessor(self, stub: StubAccessor) -> None:
        assert Operator(stub) == Operator(stub)
        assert Operator(stub) != Operator(StubAccessor())

    def test_info_delegates(self, stub: StubAccessor) -> None:
        assert Operator(stub).info() is stub.info()


class TestOperatorPaths:
    """Paths are normalized before they reach the accessor."""

    def test_normalized_before_delegation(self, stub: StubAccessor) -> None:
        stub.stat_results["a/b"] = Metadata(mode=EntryMode.FILE)
        Operator(stub).stat("/a//./b")
        assert stub.calls == [("stat", "a/b", OpStat())]

    def test_empty_path_is_root(self, stub: StubAccessor) -> None:
        stub.stat_results["/"] = Metadata(mode=EntryMode.DIR)
        assert Operator(stub).stat("").is_dir

    def test_invalid_path_rejected(self, op: Operator) -> None:
        with pytest.raises(InvalidPath):
            op.read("../escape")

    def test_read_directory_path(self, op: Operator) -> None:
        with pytest.raises(IsADirectory):
            op.read("dir/")

    def test_write_directory_path(self, op: Operator) -> None:
        with pytest.raises(IsADirectory):
            op.write("dir/", b"x")

    def test_list_file_path(self, op: Operator) -> None:
        with pytest.raises(NotADirectory):
            op.list("file")

    def test_create_dir_file_path(self, op: Operator) -> None:
        with pytest.raises(NotADirectory):
            op.create_dir("file")


class TestOperatorCapabilities:
    def test_supports(self, op: Operator) -> None:
        assert op.supports(Capability.READ) is True
        assert op.supports(Capability.CREATE_DIR) is True

    def test_unsupported_operation_raises(self) -> None:
        stub = StubAccessor(capabilities=CapabilitySet({Capability.STAT}))
        with pytest.raises(CapabilityNotSupported) as exc_info:
            Operator(stub).write("/dir//a", b"x")
        err = exc_info.value
        assert err.capability == "write"
        assert err.operation is Operation.WRITE
        assert err.path == "dir/a"
        assert err.backend == "test"
        assert stub.calls == []

    def test_recursive_list_requires_capability(self) -> None:
        stub = StubAccessor(capabilities=CapabilitySet({Capability.LIST}))
        Operator(stub).list("/")
        with pytest.raises(CapabilityNotSupported):
            Operator(stub).list("/", recursive=True)


class TestOperatorDelegation:
    def test_write_and_read(self, op: Operator) -> None:
        op.write("test.txt", b"content")
        assert op.read_bytes("test.txt") == b"content"

    def test_read_stream(self, op: Operator) -> None:
        op.write("stream.txt", io.BytesIO(b"stream data"))
        stream = op.read("stream.txt")
        assert stream.read() == b"stream data"
        stream.close()

    def test_read_bytes_range(self, op: Operator) -> None:
        op.write("range.txt", b"hello world")
        assert op.read_bytes("range.txt", offset=6) == b"world"
        assert op.read_bytes("range.txt", offset=0, size=5) == b"hello"

    def test_write_no_overwrite(self, op: Operator) -> None:
        op.write("f.txt", b"one")
        with pytest.raises(AlreadyExists):
            op.write("f.txt", b"two")
        op.write("f.txt", b"two", overwrite=True)
        assert op.read_bytes("f.txt") == b"two"

    def test_stat_shapes(self, op: Operator) -> None:
        op.write("d/f.txt", b"abc")
        assert op.stat("d/f.txt").content_length == 3
        assert op.stat("d/").is_dir
        with pytest.raises(NotFound):
            op.stat("d")
        with pytest.raises(NotFound):
            op.stat("d/f.txt/")

    def test_exists(self, op: Operator) -> None:
        assert op.exists("nope.txt") is False
        op.write("yes.txt", b"")
        assert op.exists("yes.txt") is True

    def test_list(self, op: Operator) -> None:
        op.write("d/a.txt", b"a")
        op.write("d/sub/b.txt", b"b")
        assert [e.path for e in op.list("d/")] == ["d/a.txt", "d/sub/"]
        assert sorted(e.path for e in op.list("d/", recursive=True)) == ["d/a.txt", "d/sub/", "d/sub/b.txt"]

    def test_copy_and_rename(self, op: Operator) -> None:
        op.write("src.txt", b"data")
        op.copy("src.txt", "copy.txt")
        op.rename("src.txt", "moved.txt")
        assert op.read_bytes("copy.txt") == b"data"
        assert op.read_bytes("moved.txt") == b"data"
        assert op.exists("src.txt") is False

    def test_delete(self, op: Operator) -> None:
        op.write("gone.txt", b"x")
        op.delete("gone.txt")
        assert op.exists("gone.txt") is False
        with pytest.raises(NotFound):
            op.delete("gone.txt")
        op.delete("gone.txt", missing_ok=True)

    def test_create_and_delete_dir(self, op: Operator) -> None:
        op.create_dir("a/b/")
        assert op.stat("a/b/").is_dir
        op.delete("a/b/")
        assert op.exists("a/b/") is False

    def test_context_manager_closes(self, stub: StubAccessor) -> None:
        with Operator(stub):
            pass
        assert stub.closed is True


class TestOperatorLayer:
    def test_layer_wraps_accessor(self, stub: StubAccessor) -> None:
        base = Operator(stub)
        checked = base.layer(SanityCheckLayer())
        assert isinstance(checked.accessor, SanityCheckAccessor)
        assert checked.accessor.inner is stub
        assert base.accessor is stub

    def test_layered_stat_rejects_bad_shape(self, stub: StubAccessor) -> None:
        stub.stat_results["file"] = Metadata(mode=EntryMode.DIR)
        assert Operator(stub).stat("file").is_dir
        with pytest.raises(Unexpected):
            Operator(stub).layer(SanityCheckLayer()).stat("file")


class TestRemoveAll:
    def test_removes_tree(self, op: Operator) -> None:
        op.write("a/d.txt", b"1")
        op.write("a/b/c.txt", b"2")
        op.write("a/b/e/f.txt", b"3")
        op.write("keep.txt", b"4")
        op.remove_all("a/")
        assert op.exists("a/") is False
        assert op.exists("keep.txt") is True

    def test_removes_single_file(self, op: Operator) -> None:
        op.write("one.txt", b"1")
        op.remove_all("one.txt")
        assert op.exists("one.txt") is False

    def test_missing_file_is_noop(self, op: Operator) -> None:
        op.remove_all("missing.txt")

    def test_root_is_emptied_but_kept(self, op: Operator) -> None:
        op.write("x/y.txt", b"1")
        op.write("z.txt", b"2")
        op.remove_all("/")
        assert list(op.list("/")) == []
        assert op.stat("/").is_dir

    def test_malformed_listing_stops_before_directories(self, stub: StubAccessor) -> None:
        stub.listings["d/"] = [
            Entry("d/a", Metadata(mode=EntryMode.FILE)),
            Entry("d/sub", Metadata(mode=EntryMode.DIR)),
            Entry("d/sub/b", Metadata(mode=EntryMode.FILE)),
        ]
        checked = Operator(stub).layer(SanityCheckLayer())
        with pytest.raises(Unexpected) as exc_info:
            checked.remove_all("d/")
        assert exc_info.value.context["list_path"] == "d/"
        deletes = [c for c in stub.calls if c[0] == "delete"]
        assert deletes == [("delete", "d/a", OpDelete(missing_ok=True))]


class TestAccessorDefaults:
    """Optional operations a service does not override are refused."""

    class _ReadOnly(StubAccessor):
        create_dir = Accessor.create_dir
        copy = Accessor.copy
        rename = Accessor.rename

    def test_refused_with_operation_and_path(self) -> None:
        acc = self._ReadOnly(scheme="ro")
        with pytest.raises(CapabilityNotSupported) as exc_info:
            acc.create_dir("d/", OpCreateDir())
        err = exc_info.value
        assert err.operation is Operation.CREATE_DIR
        assert err.path == "d/"
        assert err.backend == "ro"
        with pytest.raises(CapabilityNotSupported) as exc_info:
            acc.rename("a", "b", OpRename())
        assert exc_info.value.operation is Operation.RENAME
        assert exc_info.value.path == "a"
