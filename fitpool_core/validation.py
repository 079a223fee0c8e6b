from __future__ import annotations

from typing import TypeVar

from .errors import InvalidArgumentError

T = TypeVar("T")


def require_not_none(value: T | None, name: str) -> T:
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None", context={"argument": name})
    return value


def require_positive(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer", context={"argument": name})
    if value <= 0:
        raise InvalidArgumentError(
            f"{name} must be positive, got {value}",
            context={"argument": name, "value": value},
        )
    return value


def require_non_negative(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer", context={"argument": name})
    if value < 0:
        raise InvalidArgumentError(
            f"{name} must be non-negative, got {value}",
            context={"argument": name, "value": value},
        )
    return value


def require_in_range(value: int, low: int, high: int, name: str) -> int:
    """Check that ``low <= value <= high`` (both bounds inclusive)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer", context={"argument": name})
    if value < low or value > high:
        raise InvalidArgumentError(
            f"{name} must be in [{low}, {high}], got {value}",
            context={"argument": name, "value": value, "low": low, "high": high},
        )
    return value


def require_ordered(score: T | None, name: str = "score") -> T:
    """Reject None and self-unequal values such as NaN, which break the total order."""
    score = require_not_none(score, name)
    if score != score:
        raise InvalidArgumentError(
            f"{name} must be totally ordered, got {score!r}",
            context={"argument": name},
        )
    return score
