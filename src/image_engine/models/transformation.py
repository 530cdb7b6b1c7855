"""Pydantic models describing a requested transformation chain."""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TransformationStep(BaseModel):
    """One named, parameterized transformation in a request."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(..., min_length=1, description="Registered transformation name")
    params: dict[str, Any] = Field(
        default_factory=dict, description="Raw, unvalidated transformation parameters"
    )

    @classmethod
    def parse(cls, raw: str) -> "TransformationStep":
        """Parse the compact ``name:key=value,key=value`` syntax.

        Example:
            >>> TransformationStep.parse("crop:x=0,y=0,width=10,height=10")

        Values stay strings; each transformation validates and coerces its own
        parameters.
        """
        name, _, raw_params = raw.partition(":")
        params: dict[str, str] = {}

        for pair in raw_params.split(","):
            if not pair.strip():
                continue

            key, separator, value = pair.partition("=")
            if not separator or not key.strip():
                raise ValueError(f"Invalid transformation parameter '{pair.strip()}'")

            params[key.strip()] = value.strip()

        return cls(name=name, params=params)


class TransformationRequest(BaseModel):
    """Ordered transformation chain. Steps are applied in list order."""

    steps: list[TransformationStep] = Field(default_factory=list)

    @classmethod
    def from_strings(cls, values: Iterable[str]) -> "TransformationRequest":
        return cls(steps=[TransformationStep.parse(value) for value in values])

    @classmethod
    def of(cls, *steps: tuple[str, Mapping[str, Any]] | str) -> "TransformationRequest":
        """Build a request from ``(name, params)`` pairs or bare names."""
        parsed: list[TransformationStep] = []
        for step in steps:
            if isinstance(step, str):
                parsed.append(TransformationStep(name=step))
            else:
                name, params = step
                parsed.append(TransformationStep(name=name, params=dict(params)))
        return cls(steps=parsed)

    def names(self) -> list[str]:
        return [step.name for step in self.steps]
