"""Configuration — config-as-code, from_dict(), layers and custom services.

Demonstrates different ways to create a RegistryConfig, how operator
profiles choose their layers, and how to register your own layer.
"""

from __future__ import annotations

import tempfile

from layered_store import (
    OperatorProfile,
    Registry,
    RegistryConfig,
    SanityCheckLayer,
    ServiceConfig,
    register_layer,
)

if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        # --- Option 1: Config-as-code with Python objects ---
        config = RegistryConfig(
            services={"local": ServiceConfig(type="fs", options={"root": tmp})},
            operators={
                # Sanity checking is on unless a profile opts out.
                "checked": OperatorProfile(service="local"),
                "raw": OperatorProfile(service="local", layers=()),
            },
        )

        with Registry(config) as registry:
            checked = registry.get_operator("checked")
            raw = registry.get_operator("raw")

            checked.write("uploads/photo.jpg", b"\xff\xd8\xff\xe0fake-jpeg-data")
            print("Checked accessor:", type(checked.accessor).__name__)
            print("Raw accessor:    ", type(raw.accessor).__name__)
            print("Same files:", [e.path for e in raw.list("uploads/")])

    # --- Option 2: from_dict() — e.g. loaded from TOML or JSON ---
    with tempfile.TemporaryDirectory() as tmp:
        raw_config = {
            "services": {
                "local": {"type": "fs", "options": {"root": tmp}},
            },
            "operators": {
                "main": {"service": "local", "layers": ["sanity_check"]},
            },
        }
        config = RegistryConfig.from_dict(raw_config)
        with Registry(config) as registry:
            op = registry.get_operator("main")
            op.write("from_dict.txt", b"configured from a dict")
            print("\nfrom_dict:", op.read_bytes("from_dict.txt"))

    # --- Option 3: registering a layer under a custom name ---
    register_layer("strict", SanityCheckLayer)
    with tempfile.TemporaryDirectory() as tmp:
        config = RegistryConfig(
            services={"local": ServiceConfig(type="fs", options={"root": tmp})},
            operators={"main": OperatorProfile(service="local", layers=("strict",))},
        )
        with Registry(config) as registry:
            print("\nCustom layer:", registry.get_operator("main").accessor)

    # --- S3 service config (not connected; shown for reference) ---
    s3_config = RegistryConfig(
        services={
            "s3": ServiceConfig(
                type="s3",
                options={
                    "bucket": "my-bucket",
                    "root": "tenant-a",
                    "endpoint_url": "http://localhost:9000",
                    "key": "minioadmin",
                    "secret": "minioadmin",
                },
            ),
        },
        operators={"objects": OperatorProfile(service="s3")},
    )
    s3_config.validate()
    print("\nS3 config valid:", sorted(s3_config.operators))

    print("\nDone!")
