"""
Pytest configuration and fixtures for image-engine tests.
Provides AWS mocking, S3 bucket fixtures, storage drivers and generated images.
"""

import os
from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from image_engine.infrastructure.aws.s3_image_storage import S3ImageStorage
from image_engine.infrastructure.config import FilesystemStorageConfig, ObjectStoreConfig
from image_engine.infrastructure.filesystem.filesystem_image_storage import (
    FilesystemImageStorage,
)
from image_engine.models.image import ImageBlob, StorageKey

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-image-bucket")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-engine-tests")
os.environ.pop("AWS_ENDPOINT_URL", None)


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
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (reused, moto cleans up on context exit)
    """
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """
    Helper to get an object from S3.

    Usage:
        content = s3_get_object("images/owner/img")
    """

    def _get(key: str) -> bytes:
        response = s3_client.get_object(
            Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"),
            Key=key,
        )
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def object_store_config() -> ObjectStoreConfig:
    return ObjectStoreConfig(
        collection_name=os.environ["IMAGE_S3_BUCKET_NAME"],
        region_name=os.environ["AWS_REGION"],
    )


@pytest.fixture
def s3_storage(s3_bucket, object_store_config) -> S3ImageStorage:
    return S3ImageStorage(object_store_config)


@pytest.fixture
def storage_root(tmp_path) -> Path:
    root = tmp_path / "images"
    root.mkdir()
    return root


@pytest.fixture
def filesystem_storage(storage_root) -> FilesystemImageStorage:
    return FilesystemImageStorage(FilesystemStorageConfig(root_directory=storage_root))


@pytest.fixture(params=["filesystem", "s3"])
def storage_driver(request):
    """Every storage backend, for behaviour that must not differ between them."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def storage_key() -> StorageKey:
    return StorageKey(owner_key="publickey", image_identifier="a1b2c3d4e5f60718")


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory for encoded test images.

    Usage:
        data = make_image(100, 100, "JPEG")
    """

    def _make(
        width: int = 100,
        height: int = 100,
        image_format: str = "JPEG",
        color: tuple[int, int, int] = (200, 30, 30),
    ) -> bytes:
        mode = "P" if image_format == "GIF" else "RGB"
        image = Image.new("RGB", (width, height), color)
        if mode == "P":
            image = image.convert("P")
        buffer = BytesIO()
        image.save(buffer, format=image_format)
        return buffer.getvalue()

    return _make


@pytest.fixture
def jpeg_blob(make_image) -> ImageBlob:
    """100x100 JPEG blob."""
    return ImageBlob.from_bytes(make_image(100, 100, "JPEG"))


@pytest.fixture
def png_blob(make_image) -> ImageBlob:
    """100x100 PNG blob."""
    return ImageBlob.from_bytes(make_image(100, 100, "PNG"))


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    import base64

    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)
