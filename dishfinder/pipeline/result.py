from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class StageError:
    stage: str
    message: str


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Either a stage's value or a tagged error, never both."""

    value: T | None = None
    error: StageError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> StageResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, stage: str, message: str) -> StageResult[T]:
        return cls(error=StageError(stage=stage, message=message))
