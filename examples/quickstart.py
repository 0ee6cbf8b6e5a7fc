"""Quickstart — minimal config, write, stat and list with layered-store.

Demonstrates:
- Creating a RegistryConfig with a local filesystem service
- Opening a Registry and getting an Operator (sanity check applied by default)
- Writing, reading and listing files
"""

from __future__ import annotations

import tempfile

from layered_store import OperatorProfile, Registry, RegistryConfig, ServiceConfig

if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        config = RegistryConfig(
            services={"local": ServiceConfig(type="fs", options={"root": tmp})},
            operators={"data": OperatorProfile(service="local")},
        )

        with Registry(config) as registry:
            op = registry.get_operator("data")

            # Write a file
            op.write("reports/hello.txt", b"Hello, world!")
            print(f"File exists: {op.exists('reports/hello.txt')}")

            # Read it back
            print(f"Content: {op.read_bytes('reports/hello.txt')}")

            # Files and directories differ by their trailing slash
            meta = op.stat("reports/hello.txt")
            print(f"Size: {meta.content_length} bytes, modified {meta.last_modified}")
            print(f"reports/ is a directory: {op.stat('reports/').is_dir}")

            for entry in op.list("/", recursive=True):
                print(f"  {entry.path:<20} {entry.mode.value}")

    print("Done! Temp directory cleaned up automatically.")
