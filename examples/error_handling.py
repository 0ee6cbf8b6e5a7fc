"""Error handling — normalized errors and the sanity-check layer.

Demonstrates the error hierarchy, the structured context every error
carries, and how ``SanityCheckLayer`` turns a malformed service response
into ``Unexpected`` instead of letting it reach the caller.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from layered_store import (
    AlreadyExists,
    InvalidPath,
    IsADirectory,
    NotFound,
    Operator,
    OperatorProfile,
    Registry,
    RegistryConfig,
    SanityCheckLayer,
    ServiceConfig,
    StoreError,
    Unexpected,
)
from layered_store.services import FsAccessor


class SlashlessFs(FsAccessor):
    """A filesystem service that forgets the trailing slash on directories."""

    def _rel(self, full: Path) -> str:
        return super()._rel(full).rstrip("/")


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        config = RegistryConfig(
            services={"local": ServiceConfig(type="fs", options={"root": tmp})},
            operators={"files": OperatorProfile(service="local")},
        )

        with Registry(config) as registry:
            op = registry.get_operator("files")

            # --- NotFound ---
            try:
                op.read_bytes("nonexistent.txt")
            except NotFound as exc:
                print(f"NotFound: {exc}")
                print(f"  kind={exc.kind.value}, path={exc.path}, backend={exc.backend}")

            # --- AlreadyExists ---
            op.write("existing.txt", b"data")
            try:
                op.write("existing.txt", b"new data")
            except AlreadyExists as exc:
                print(f"\nAlreadyExists: {exc}")

            # --- InvalidPath (path traversal attempt) ---
            try:
                op.read_bytes("../../etc/passwd")
            except InvalidPath as exc:
                print(f"\nInvalidPath: {exc}")

            # --- IsADirectory (directory-shaped path where a file is needed) ---
            try:
                op.read_bytes("reports/")
            except IsADirectory as exc:
                print(f"\nIsADirectory: {exc}")

            # --- Catch any error with the base class ---
            for path in ["missing.txt", "../../escape"]:
                try:
                    op.read_bytes(path)
                except StoreError as exc:
                    print(f"\nStoreError ({type(exc).__name__}): {exc}")

            # --- KeyError for unknown operator names ---
            try:
                registry.get_operator("unknown")
            except KeyError as exc:
                print(f"\nKeyError: {exc}")

    # --- Unexpected: a service that reports directories without "/" ---
    with tempfile.TemporaryDirectory() as tmp:
        raw = Operator(SlashlessFs(root=tmp))
        raw.write("docs/readme.txt", b"hi")
        print(f"\nUnchecked listing: {[e.path for e in raw.list('/')]}")

        checked = raw.layer(SanityCheckLayer())
        try:
            list(checked.list("/"))
        except Unexpected as exc:
            print(f"Unexpected: {exc}")
            print(f"  list_path={exc.context['list_path']!r}, path={exc.path!r}")

    print("\nDone!")
