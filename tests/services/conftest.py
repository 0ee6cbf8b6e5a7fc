"""Service test fixtures -- parameterized for conformance testing."""

from __future__ import annotations

import socket
import tempfile
import uuid
from typing import TYPE_CHECKING

import pytest

from layered_store.services._fs import FsAccessor

if TYPE_CHECKING:
    from collections.abc import Iterator

    from layered_store._accessor import Accessor

REGION = "us-east-1"


def _s3_available() -> bool:
    try:
        import boto3  # noqa: F401
        import moto  # noqa: F401
        import s3fs  # noqa: F401

        return True
    except ImportError:
        return False


def _free_port() -> int:
    with socket.socket() as s:
        s.bind(("", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def moto_server() -> Iterator[str | None]:
    """Start a moto HTTP server for the test session.

    Uses server mode instead of mock_aws() to avoid Python 3.13
    PEP 667 f_locals incompatibility with s3fs/aiobotocore.
    """
    if not _s3_available():
        yield None
        return
    from moto.moto_server.threaded_moto_server import ThreadedMotoServer

    port = _free_port()
    server = ThreadedMotoServer(port=port, verbose=False)
    server.start()
    yield f"http://127.0.0.1:{port}"
    server.stop()


def make_bucket(endpoint_url: str) -> str:
    """Create a fresh bucket on the moto server and return its name."""
    import boto3

    bucket = f"test-{uuid.uuid4().hex[:8]}"
    client = boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        region_name=REGION,
    )
    client.create_bucket(Bucket=bucket)
    return bucket


_s3_param = pytest.param(
    "s3",
    marks=pytest.mark.skipif(not _s3_available(), reason="moto/s3fs not installed"),
)


@pytest.fixture(params=["fs", _s3_param])
def accessor(request: pytest.FixtureRequest, moto_server: str | None) -> Iterator[Accessor]:
    """Parameterized accessor fixture. Add new services here."""
    if request.param == "fs":
        with tempfile.TemporaryDirectory() as tmp:
            yield FsAccessor(root=tmp)
    elif request.param == "s3":
        from layered_store.services._s3 import S3Accessor

        assert moto_server is not None
        acc = S3Accessor(
            bucket=make_bucket(moto_server),
            key="testing",
            secret="testing",
            region_name=REGION,
            endpoint_url=moto_server,
        )
        yield acc
        acc.close()
    else:
        pytest.skip(f"Unknown service: {request.param}")
