"""
Pytest configuration and fixtures for image-ingest tests.
Provides AWS mocking, S3 and local storage fixtures, and generated images.
"""

import io
import os
from collections.abc import Callable, Iterator
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_BUCKET", "image-ingest-test-bucket")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_LOG_LEVEL", "WARNING")

from core.infrastructure.adapters.s3_adapter import S3Adapter  # noqa: E402
from core.infrastructure.aws.s3_image_storage import S3ImageStorage  # noqa: E402
from core.infrastructure.local.local_image_storage import LocalImageStorage  # noqa: E402
from core.models.settings import ServiceSettings  # noqa: E402

BUCKET_NAME = os.environ["AWS_BUCKET"]


@pytest.fixture
def bucket_name() -> str:
    return BUCKET_NAME


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(Bucket=bucket_name, Delete={"Objects": delete_keys})
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    try:
        s3_client.head_bucket(Bucket=BUCKET_NAME)
    except ClientError:
        s3_client.create_bucket(Bucket=BUCKET_NAME)

    yield s3_client

    _cleanup_s3_objects(s3_client, BUCKET_NAME)


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("images/img.jpg", image_bytes, "image/jpeg")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_bucket.put_object(Bucket=BUCKET_NAME, Key=key, Body=body, ContentType=content_type)

    return _put


@pytest.fixture
def s3_get_object(s3_bucket) -> Callable[[str], bytes]:
    """
    Helper to get an object from S3.

    Usage:
        content = s3_get_object("images/img.jpg")
    """

    def _get(key: str) -> bytes:
        response: dict[str, Any] = s3_bucket.get_object(Bucket=BUCKET_NAME, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_keys(s3_bucket) -> Callable[[], list[str]]:
    """Helper returning every key currently in the bucket."""

    def _keys() -> list[str]:
        response = s3_bucket.list_objects_v2(Bucket=BUCKET_NAME)
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _keys


@pytest.fixture
def s3_settings() -> ServiceSettings:
    return ServiceSettings(storage="s3", aws_bucket=BUCKET_NAME, aws_region="us-east-1")


@pytest.fixture
def s3_storage(s3_bucket, s3_settings) -> S3ImageStorage:
    return S3ImageStorage(S3Adapter(s3_settings))


@pytest.fixture
def local_settings(tmp_path) -> ServiceSettings:
    return ServiceSettings(
        storage="local",
        upload_dir=str(tmp_path / "uploads"),
        base_url="http://localhost:3000",
    )


@pytest.fixture
def local_storage(local_settings) -> LocalImageStorage:
    return LocalImageStorage(
        local_settings.upload_dir,
        public_mount=local_settings.public_mount,
        base_url=local_settings.base_url,
    )


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Helper to render a solid-colour image in any Pillow-writable format.

    Usage:
        png = make_image("PNG", (800, 600))
    """

    def _make(image_format: str = "PNG", size: tuple[int, int] = (800, 600), mode: str = "RGB") -> bytes:
        color: Any = (200, 30, 60) if mode == "RGB" else (200, 30, 60, 128)
        if mode in ("L", "P"):
            color = 120

        image = Image.new(mode, size, color)
        output = io.BytesIO()
        image.save(output, format=image_format)
        return output.getvalue()

    return _make


@pytest.fixture
def sample_png(make_image) -> bytes:
    """An 800x600 PNG."""
    return make_image("PNG", (800, 600))


@pytest.fixture
def clean_bootstrap() -> Iterator[None]:
    """Reset process-level settings/pipeline caches around a test."""
    from core.services import bootstrap

    bootstrap.reset()
    yield
    bootstrap.reset()
