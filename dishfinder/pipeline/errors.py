from __future__ import annotations


class PipelineError(Exception):
    """Base class for failures that abort a dish search request."""

    status_code: int = 500


class InvalidQueryError(PipelineError):
    status_code = 400


class MissingConfigError(PipelineError):
    def __init__(self, key_name: str) -> None:
        self.key_name = key_name
        super().__init__(f"{key_name} is not configured")


class RankingError(PipelineError):
    """Raised when the batched ranking response misses or garbles a restaurant."""

    def __init__(self, index: int, restaurant_name: str, line: str | None, problem: str) -> None:
        self.index = index
        self.restaurant_name = restaurant_name
        self.line = line
        if line is None:
            message = f"AI failed to analyze restaurant {index}: {restaurant_name}. {problem}"
        else:
            message = (
                f"Failed to parse analysis for restaurant {index}: {restaurant_name}. "
                f"Line: {line}. Error: {problem}"
            )
        super().__init__(message)
