"""Exception hierarchy for fitness-ranked candidate pools."""

from __future__ import annotations

from typing import Any


class FitPoolError(Exception):
    """Base class for all pool errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class InvalidArgumentError(FitPoolError, ValueError):
    """Raised before any mutation when a caller passes an unusable argument."""


class LogicalInconsistencyError(FitPoolError, AssertionError):
    """Raised when a pool's internal bookkeeping no longer matches its contents."""


__all__ = [
    "FitPoolError",
    "InvalidArgumentError",
    "LogicalInconsistencyError",
]
