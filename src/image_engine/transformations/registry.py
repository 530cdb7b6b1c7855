"""Name -> transformation lookup used by the pipeline."""

from collections.abc import Iterable, Iterator, Mapping

from aws_lambda_powertools import Logger

from image_engine.infrastructure.adapters.pillow_adapter import ImageProcessorProtocol
from image_engine.transformations.base import Transformation
from image_engine.transformations.crop import Crop
from image_engine.transformations.desaturate import Desaturate
from image_engine.transformations.flip import FlipHorizontally, FlipVertically
from image_engine.transformations.max_size import MaxSize
from image_engine.transformations.progressive import Progressive
from image_engine.transformations.resize import Resize
from image_engine.transformations.rotate import Rotate

logger = Logger(UTC=True)

BUILTIN_TRANSFORMATIONS: tuple[type[Transformation], ...] = (
    Crop,
    Desaturate,
    FlipHorizontally,
    FlipVertically,
    MaxSize,
    Progressive,
    Resize,
    Rotate,
)


class TransformationRegistry(Mapping[str, Transformation]):
    """Transformations registered by name.

    Registration happens at configuration time; the pipeline only reads from
    the registry, so it must not change while a pipeline is running.
    """

    def __init__(self, transformations: Iterable[Transformation] = ()) -> None:
        self._transformations: dict[str, Transformation] = {}
        for transformation in transformations:
            self.register(transformation)

    def register(self, transformation: Transformation, *, name: str | None = None) -> None:
        """Register `transformation` under `name` (defaults to its own name).

        Raises:
            ValueError: If the name is empty or already registered
        """
        name = name or transformation.name
        if not name:
            raise ValueError("Transformation name must not be empty")

        if name in self._transformations:
            raise ValueError(f"Transformation '{name}' is already registered")

        self._transformations[name] = transformation
        logger.debug("Registered transformation", extra={"transformation": name})

    def __getitem__(self, name: str) -> Transformation:
        return self._transformations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._transformations)

    def __len__(self) -> int:
        return len(self._transformations)


def default_registry(processor: ImageProcessorProtocol | None = None) -> TransformationRegistry:
    """Registry holding every built-in transformation, sharing one processor."""
    return TransformationRegistry(cls(processor) for cls in BUILTIN_TRANSFORMATIONS)
