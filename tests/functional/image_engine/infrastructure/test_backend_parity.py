"""
Behaviour every storage backend must share.

Each test runs against both the filesystem driver and the S3 driver (moto).
"""

from io import BytesIO

import pytest
from PIL import Image

from image_engine.models.errors import StorageErrorKind, StorageNotFoundError
from image_engine.models.image import ImageBlob, StorageKey
from image_engine.models.transformation import TransformationRequest
from image_engine.pipeline.pipeline import TransformationPipeline


class TestStorageDriver:
    def test_store_and_load(self, storage_driver, storage_key, jpeg_blob) -> None:
        storage_driver.store(storage_key, jpeg_blob)

        loaded = storage_driver.load(storage_key)

        assert loaded.data == jpeg_blob.data
        assert (loaded.width, loaded.height) == (100, 100)
        assert loaded.mime_type == "image/jpeg"
        assert loaded.transformed is False
        assert storage_driver.exists(storage_key)

    def test_opaque_bytes_round_trip(self, storage_driver, storage_key) -> None:
        storage_driver.store(storage_key, ImageBlob(data=b"\x00\x01not-an-image"))

        loaded = storage_driver.load(storage_key)

        assert loaded.data == b"\x00\x01not-an-image"
        assert (loaded.width, loaded.height) == (0, 0)

    def test_load_missing(self, storage_driver, storage_key) -> None:
        with pytest.raises(StorageNotFoundError) as exc:
            storage_driver.load(storage_key)

        assert exc.value.kind is StorageErrorKind.NOT_FOUND

    def test_delete_missing(self, storage_driver, storage_key) -> None:
        with pytest.raises(StorageNotFoundError):
            storage_driver.delete(storage_key)

    def test_overwrite(self, storage_driver, storage_key, jpeg_blob, png_blob) -> None:
        storage_driver.store(storage_key, jpeg_blob)
        storage_driver.store(storage_key, png_blob)

        loaded = storage_driver.load(storage_key)

        assert loaded.data == png_blob.data
        assert loaded.mime_type == "image/png"

    def test_delete_twice(self, storage_driver, storage_key, png_blob) -> None:
        storage_driver.store(storage_key, png_blob)

        storage_driver.delete(storage_key)

        assert not storage_driver.exists(storage_key)
        with pytest.raises(StorageNotFoundError):
            storage_driver.delete(storage_key)
        with pytest.raises(StorageNotFoundError):
            storage_driver.load(storage_key)

    def test_keys_are_isolated(self, storage_driver, jpeg_blob, png_blob) -> None:
        first = StorageKey(owner_key="owner", image_identifier="abc123")
        second = StorageKey(owner_key="owner", image_identifier="abc124")
        other_owner = StorageKey(owner_key="other", image_identifier="abc123")

        storage_driver.store(first, jpeg_blob)
        storage_driver.store(second, png_blob)

        assert storage_driver.load(first).data == jpeg_blob.data
        assert storage_driver.load(second).data == png_blob.data
        assert not storage_driver.exists(other_owner)

        storage_driver.delete(first)

        assert storage_driver.exists(second)

    def test_store_transformed_variant(self, storage_driver, storage_key, jpeg_blob) -> None:
        storage_driver.store(storage_key, jpeg_blob)

        blob = storage_driver.load(storage_key)
        TransformationPipeline().run(
            blob,
            TransformationRequest.from_strings(["crop:x=0,y=0,width=40,height=30", "progressive"]),
        )
        variant_key = StorageKey(owner_key=storage_key.owner_key, image_identifier="variant01")
        storage_driver.store(variant_key, blob)

        variant = storage_driver.load(variant_key)
        original = storage_driver.load(storage_key)

        assert (variant.width, variant.height) == (40, 30)
        assert variant.mime_type == "image/jpeg"
        assert original.data == jpeg_blob.data

    def test_progressive_survives_reload(self, storage_driver, storage_key, jpeg_blob) -> None:
        TransformationPipeline().run(jpeg_blob, TransformationRequest.of("progressive"))
        storage_driver.store(storage_key, jpeg_blob)

        reloaded = storage_driver.load(storage_key)
        TransformationPipeline().run(
            reloaded,
            TransformationRequest.of(("crop", {"x": 0, "y": 0, "width": 40, "height": 40})),
        )

        assert reloaded.interlaced is True
        assert Image.open(BytesIO(reloaded.data)).info.get("progressive") == 1
