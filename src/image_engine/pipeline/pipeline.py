"""Ordered application of a transformation chain to an image blob."""

from collections.abc import Mapping
from enum import Enum

from aws_lambda_powertools import Logger

from image_engine.models.errors import (
    PipelineStepFailedError,
    TransformationError,
    UnknownTransformationError,
)
from image_engine.models.image import ImageBlob
from image_engine.models.transformation import TransformationRequest, TransformationStep
from image_engine.transformations.base import Transformation
from image_engine.transformations.registry import default_registry

logger = Logger(UTC=True)


class PipelineState(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class PipelineRun:
    """A single execution of a transformation request against one blob.

    Every name in the request is resolved before the first step runs, and
    the steps operate on a private copy of the blob. The caller's blob is
    only updated once all steps succeed, so a failed run never leaves a
    partially transformed blob behind.
    """

    def __init__(
        self,
        blob: ImageBlob,
        request: TransformationRequest,
        registry: Mapping[str, Transformation],
    ) -> None:
        self._blob = blob
        self._request = request
        self._registry = registry
        self.state = PipelineState.PENDING
        self.completed_steps = 0
        self.error: Exception | None = None

    def execute(self) -> ImageBlob:
        """Run every step in order and return the transformed blob.

        Raises:
            RuntimeError: If the run has already been executed
            UnknownTransformationError: If a step names an unregistered
                transformation; no step has run
            PipelineStepFailedError: If a step fails; carries the step index
                and the transformation error as `cause`
        """
        if self.state is not PipelineState.PENDING:
            raise RuntimeError(f"Pipeline run already {self.state.value.lower()}")

        try:
            resolved = self._resolve()
        except UnknownTransformationError as exc:
            self._fail(exc)
            raise

        self.state = PipelineState.RUNNING
        working = self._blob.copy()

        for index, (step, transformation) in enumerate(resolved):
            logger.debug(
                "Running pipeline step",
                extra={"index": index, "transformation": step.name},
            )

            try:
                transformation.apply(working, step.params)
            except TransformationError as exc:
                error = PipelineStepFailedError(
                    index=index,
                    transformation=step.name,
                    cause=exc,
                )
                self._fail(error)
                raise error from exc

            self.completed_steps += 1

        self._blob.assign(working)
        self.state = PipelineState.SUCCEEDED

        logger.info(
            "Pipeline completed",
            extra={"steps": self.completed_steps, "transformations": self._request.names()},
        )
        return self._blob

    def _resolve(self) -> list[tuple[TransformationStep, Transformation]]:
        resolved: list[tuple[TransformationStep, Transformation]] = []

        for index, step in enumerate(self._request.steps):
            transformation = self._registry.get(step.name)
            if transformation is None:
                raise UnknownTransformationError(index=index, transformation=step.name)
            resolved.append((step, transformation))

        return resolved

    def _fail(self, error: Exception) -> None:
        self.state = PipelineState.FAILED
        self.error = error
        logger.warning(
            "Pipeline failed",
            extra={
                "error": str(error),
                "error_type": type(error).__name__,
                "completed_steps": self.completed_steps,
            },
        )


class TransformationPipeline:
    """Applies transformation requests using a name -> transformation registry.

    The pipeline holds no per-run state and may be shared; each blob must only
    be handed to one run at a time.
    """

    def __init__(self, registry: Mapping[str, Transformation] | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> Mapping[str, Transformation]:
        return self._registry

    def start(self, blob: ImageBlob, request: TransformationRequest) -> PipelineRun:
        """Create a pending run; call `execute()` on it to apply the request."""
        return PipelineRun(blob, request, self._registry)

    def run(self, blob: ImageBlob, request: TransformationRequest) -> ImageBlob:
        """Apply `request` to `blob` and return it.

        Stops at the first failing step. On failure the blob is unchanged.
        """
        return self.start(blob, request).execute()
