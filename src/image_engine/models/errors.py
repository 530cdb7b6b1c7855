"""Custom exception classes for the image engine."""

from enum import Enum
from typing import Any

from image_engine.utils.constants import (
    ERROR_CODE_INVALID_STORAGE_KEY,
    ERROR_CODE_PIPELINE_STEP_FAILED,
    ERROR_CODE_STORAGE_NOT_FOUND,
    ERROR_CODE_STORAGE_UNAVAILABLE,
    ERROR_CODE_STORAGE_UNWRITABLE,
    ERROR_CODE_TRANSFORMATION_BACKEND_FAILURE,
    ERROR_CODE_TRANSFORMATION_INVALID_PARAMS,
    ERROR_CODE_UNKNOWN_TRANSFORMATION,
)


class ImageEngineError(Exception):
    """
    Base exception for all image engine errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class InvalidKeyError(ImageEngineError):
    """Raised when an owner key or image identifier is malformed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_STORAGE_KEY,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


# ============================================================================
# Storage
# ============================================================================


class StorageErrorKind(str, Enum):
    UNWRITABLE = "UNWRITABLE"
    NOT_FOUND = "NOT_FOUND"
    UNAVAILABLE = "UNAVAILABLE"


_STORAGE_ERROR_CODES: dict[StorageErrorKind, str] = {
    StorageErrorKind.UNWRITABLE: ERROR_CODE_STORAGE_UNWRITABLE,
    StorageErrorKind.NOT_FOUND: ERROR_CODE_STORAGE_NOT_FOUND,
    StorageErrorKind.UNAVAILABLE: ERROR_CODE_STORAGE_UNAVAILABLE,
}


class StorageError(ImageEngineError):
    """Raised when a storage driver operation fails.

    The `kind` is the only part of the error callers should branch on; it is
    identical across storage backends.
    """

    kind: StorageErrorKind

    def __init__(
        self,
        *,
        kind: StorageErrorKind,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.kind = kind
        super().__init__(
            message=message,
            error_code=error_code or _STORAGE_ERROR_CODES[kind],
            details=details,
        )


class StorageUnwritableError(StorageError):
    """Raised when the storage target cannot be written to."""

    def __init__(
        self,
        *,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=StorageErrorKind.UNWRITABLE,
            message=message,
            details=details,
        )


class StorageNotFoundError(StorageError):
    """Raised when no image is stored under the requested key."""

    def __init__(
        self,
        *,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=StorageErrorKind.NOT_FOUND,
            message=message,
            details=details,
        )


class StorageUnavailableError(StorageError):
    """Raised when the storage backend fails for any other reason."""

    def __init__(
        self,
        *,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=StorageErrorKind.UNAVAILABLE,
            message=message,
            details=details,
        )


# ============================================================================
# Transformations
# ============================================================================


class TransformationErrorKind(str, Enum):
    INVALID_PARAMS = "INVALID_PARAMS"
    BACKEND_FAILURE = "BACKEND_FAILURE"


_TRANSFORMATION_ERROR_CODES: dict[TransformationErrorKind, str] = {
    TransformationErrorKind.INVALID_PARAMS: ERROR_CODE_TRANSFORMATION_INVALID_PARAMS,
    TransformationErrorKind.BACKEND_FAILURE: ERROR_CODE_TRANSFORMATION_BACKEND_FAILURE,
}


class TransformationError(ImageEngineError):
    """Raised when a single transformation cannot be applied.

    A blob is never modified by a transformation that raises this error.
    """

    kind: TransformationErrorKind
    transformation: str | None
    cause: BaseException | None

    def __init__(
        self,
        *,
        kind: TransformationErrorKind,
        message: str,
        transformation: str | None = None,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.kind = kind
        self.transformation = transformation
        self.cause = cause
        super().__init__(
            message=message,
            error_code=_TRANSFORMATION_ERROR_CODES[kind],
            details=details,
        )


class InvalidParamsError(TransformationError):
    """Raised when transformation parameters are missing or out of range."""

    def __init__(
        self,
        *,
        message: str,
        transformation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=TransformationErrorKind.INVALID_PARAMS,
            message=message,
            transformation=transformation,
            details=details,
        )


class TransformationBackendError(TransformationError):
    """Raised when the image-processing backend rejects an operation."""

    def __init__(
        self,
        *,
        message: str,
        cause: BaseException,
        transformation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=TransformationErrorKind.BACKEND_FAILURE,
            message=message,
            transformation=transformation,
            cause=cause,
            details=details,
        )


# ============================================================================
# Pipeline
# ============================================================================


class PipelineErrorKind(str, Enum):
    UNKNOWN_TRANSFORMATION = "UNKNOWN_TRANSFORMATION"
    STEP_FAILED = "STEP_FAILED"


_PIPELINE_ERROR_CODES: dict[PipelineErrorKind, str] = {
    PipelineErrorKind.UNKNOWN_TRANSFORMATION: ERROR_CODE_UNKNOWN_TRANSFORMATION,
    PipelineErrorKind.STEP_FAILED: ERROR_CODE_PIPELINE_STEP_FAILED,
}


class PipelineError(ImageEngineError):
    """Raised when a transformation pipeline cannot complete.

    `index` is the zero-based position of the offending step in the request
    and `cause` the error that stopped it, when there is one.
    """

    kind: PipelineErrorKind
    index: int
    transformation: str
    cause: TransformationError | None

    def __init__(
        self,
        *,
        kind: PipelineErrorKind,
        message: str,
        index: int,
        transformation: str,
        cause: TransformationError | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.kind = kind
        self.index = index
        self.transformation = transformation
        self.cause = cause
        super().__init__(
            message=message,
            error_code=_PIPELINE_ERROR_CODES[kind],
            details={"index": index, "transformation": transformation, **(details or {})},
        )


class UnknownTransformationError(PipelineError):
    """Raised when a request names a transformation that is not registered."""

    def __init__(self, *, index: int, transformation: str) -> None:
        super().__init__(
            kind=PipelineErrorKind.UNKNOWN_TRANSFORMATION,
            message=f"Unknown transformation '{transformation}'",
            index=index,
            transformation=transformation,
        )


class PipelineStepFailedError(PipelineError):
    """Raised when a step of the pipeline fails; wraps the step's error."""

    def __init__(
        self,
        *,
        index: int,
        transformation: str,
        cause: TransformationError,
    ) -> None:
        super().__init__(
            kind=PipelineErrorKind.STEP_FAILED,
            message=f"Transformation '{transformation}' at step {index} failed: {cause.message}",
            index=index,
            transformation=transformation,
            cause=cause,
            details={"reason": cause.error_code},
        )
