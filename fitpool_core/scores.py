from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import InvalidArgumentError


@dataclass(frozen=True, order=True)
class ScoreVector:
    """Composite fitness compared lexicographically, most significant component first.

    Use it as a ``Population`` key when a single number cannot rank candidates,
    for example a primary error term with a secondary smoothness penalty
    (negate "lower is better" terms so that higher always wins).
    """

    values: tuple[float, ...]

    def __post_init__(self) -> None:
        if not self.values:
            raise InvalidArgumentError("ScoreVector needs at least one component")
        coerced = tuple(float(value) for value in self.values)
        if any(math.isnan(value) for value in coerced):
            raise InvalidArgumentError(
                "ScoreVector components must not be NaN",
                context={"values": coerced},
            )
        object.__setattr__(self, "values", coerced)

    @classmethod
    def of(cls, *values: float) -> ScoreVector:
        return cls(tuple(values))

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> ScoreVector:
        return cls(tuple(values))

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    @property
    def primary(self) -> float:
        return self.values[0]

    def __str__(self) -> str:
        return "(" + ", ".join(f"{value:g}" for value in self.values) + ")"
