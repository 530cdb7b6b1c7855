"""Unit tests for the transformation pipeline."""

from io import BytesIO

import pytest
from PIL import Image

from image_engine.models.errors import (
    InvalidParamsError,
    PipelineStepFailedError,
    TransformationBackendError,
    UnknownTransformationError,
)
from image_engine.models.image import ImageBlob
from image_engine.models.transformation import TransformationRequest
from image_engine.pipeline.pipeline import PipelineState, TransformationPipeline
from image_engine.transformations.base import NoParams, Transformation
from image_engine.transformations.registry import TransformationRegistry, default_registry


class Recorder(Transformation):
    """Records the order it was applied in."""

    name = "record"

    def __init__(self, calls: list[str], label: str) -> None:
        super().__init__()
        self._calls = calls
        self._label = label

    def transform(self, image: Image.Image, params: NoParams) -> Image.Image:
        self._calls.append(self._label)
        return image


@pytest.fixture
def small_jpeg(make_image) -> ImageBlob:
    """20x20 JPEG blob."""
    return ImageBlob.from_bytes(make_image(20, 20, "JPEG"))


@pytest.fixture
def pipeline() -> TransformationPipeline:
    return TransformationPipeline()


CROP_10 = ("crop", {"x": 0, "y": 0, "width": 10, "height": 10})
CROP_15 = ("crop", {"x": 0, "y": 0, "width": 15, "height": 15})
RESIZE_10 = ("resize", {"width": 10})


class TestTransformationPipeline:
    def test_crop_then_progressive(self, pipeline, small_jpeg) -> None:
        result = pipeline.run(small_jpeg, TransformationRequest.of(CROP_10, "progressive"))

        assert result is small_jpeg
        assert (small_jpeg.width, small_jpeg.height) == (10, 10)
        assert small_jpeg.transformed is True
        assert small_jpeg.interlaced is True
        image = Image.open(BytesIO(small_jpeg.data))
        assert image.size == (10, 10)
        assert image.info.get("progressive") == 1

    def test_progressive_then_crop(self, pipeline, small_jpeg) -> None:
        pipeline.run(small_jpeg, TransformationRequest.of("progressive", CROP_10))

        assert (small_jpeg.width, small_jpeg.height) == (10, 10)
        assert small_jpeg.interlaced is True
        assert Image.open(BytesIO(small_jpeg.data)).info.get("progressive") == 1

    def test_order_matters(self, pipeline, make_image) -> None:
        first = ImageBlob.from_bytes(make_image(20, 20, "PNG"))
        second = first.copy()

        with pytest.raises(PipelineStepFailedError) as exc:
            pipeline.run(first, TransformationRequest.of(RESIZE_10, CROP_15))

        assert exc.value.index == 1
        assert exc.value.transformation == "crop"
        assert (first.width, first.height) == (20, 20)

        pipeline.run(second, TransformationRequest.of(CROP_15, RESIZE_10))

        assert (second.width, second.height) == (10, 10)

    def test_steps_run_in_request_order(self, png_blob) -> None:
        calls: list[str] = []
        registry = TransformationRegistry()
        for label in ("a", "b", "c"):
            registry.register(Recorder(calls, label), name=label)

        TransformationPipeline(registry).run(png_blob, TransformationRequest.of("c", "a", "b", "a"))

        assert calls == ["c", "a", "b", "a"]

    def test_request_from_strings(self, pipeline, small_jpeg) -> None:
        request = TransformationRequest.from_strings(
            ["crop:x=5,y=5,width=10,height=10", "flip_vertically"]
        )

        pipeline.run(small_jpeg, request)

        assert (small_jpeg.width, small_jpeg.height) == (10, 10)

    def test_empty_request(self, pipeline, png_blob) -> None:
        original = png_blob.copy()

        run = pipeline.start(png_blob, TransformationRequest())
        run.execute()

        assert run.state is PipelineState.SUCCEEDED
        assert run.completed_steps == 0
        assert png_blob == original


class TestPipelineFailures:
    def test_unknown_transformation(self, pipeline, small_jpeg) -> None:
        original = small_jpeg.copy()
        run = pipeline.start(small_jpeg, TransformationRequest.of(CROP_10, "sepia"))

        with pytest.raises(UnknownTransformationError) as exc:
            run.execute()

        assert exc.value.index == 1
        assert exc.value.transformation == "sepia"
        assert run.state is PipelineState.FAILED
        assert run.completed_steps == 0
        assert run.error is exc.value
        assert small_jpeg == original

    def test_invalid_params_step(self, pipeline, small_jpeg) -> None:
        original = small_jpeg.copy()
        run = pipeline.start(
            small_jpeg,
            TransformationRequest.of(("crop", {"x": 0, "y": 0, "width": 100, "height": 10})),
        )

        with pytest.raises(PipelineStepFailedError) as exc:
            run.execute()

        assert exc.value.index == 0
        assert isinstance(exc.value.cause, InvalidParamsError)
        assert exc.value.__cause__ is exc.value.cause
        assert run.state is PipelineState.FAILED
        assert small_jpeg == original

    def test_failed_step_leaves_blob_unchanged(self, pipeline, png_blob) -> None:
        original = png_blob.copy()
        run = pipeline.start(png_blob, TransformationRequest.of(CROP_10, "progressive"))

        with pytest.raises(PipelineStepFailedError) as exc:
            run.execute()

        assert exc.value.index == 1
        assert isinstance(exc.value.cause, TransformationBackendError)
        assert exc.value.details["reason"] == "TRANSFORMATION_BACKEND_FAILURE"
        assert run.completed_steps == 1
        assert png_blob == original
        assert png_blob.transformed is False

    def test_stops_at_first_failure(self, png_blob) -> None:
        calls: list[str] = []
        registry = default_registry()
        registry.register(Recorder(calls, "after"), name="after")

        with pytest.raises(PipelineStepFailedError):
            TransformationPipeline(registry).run(
                png_blob, TransformationRequest.of(CROP_15, "progressive", "after")
            )

        assert calls == []

    def test_run_cannot_be_executed_twice(self, pipeline, png_blob) -> None:
        run = pipeline.start(png_blob, TransformationRequest.of(CROP_10))
        run.execute()

        with pytest.raises(RuntimeError):
            run.execute()

        assert (png_blob.width, png_blob.height) == (10, 10)
