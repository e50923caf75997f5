"""
Stage results for the model invocation pipeline.

Each pipeline stage returns a StageResult instead of raising, so the handler
decides on fallbacks by inspecting the tag rather than catching exceptions.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import AssistantError

T = TypeVar("T")


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one pipeline stage: exactly one of value / error is set."""

    stage: str
    value: Optional[T] = None
    error: Optional[AssistantError] = None
    model: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, stage: str, value: T, model: Optional[str] = None) -> "StageResult[T]":
        return cls(stage=stage, value=value, model=model)

    @classmethod
    def failure(cls, stage: str, error: AssistantError, model: Optional[str] = None) -> "StageResult[T]":
        return cls(stage=stage, error=error, model=model)

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
