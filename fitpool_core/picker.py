from __future__ import annotations

import random
from collections.abc import Set
from typing import Protocol

from .errors import InvalidArgumentError


class IndexPicker(Protocol):
    def pick(self, excluded: Set[int], max_index: int) -> int:
        """Return an index in ``[0, max_index]`` that is not in ``excluded``.

        The caller adds the returned index to ``excluded`` before the next call.
        """
        ...


class RandomIndexPicker:
    """Uniform sampling without replacement over ``[0, max_index]``."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng: random.Random = rng or random.Random()

    @classmethod
    def seeded(cls, seed: int) -> RandomIndexPicker:
        return cls(random.Random(seed))

    def pick(self, excluded: Set[int], max_index: int) -> int:
        if max_index < 0:
            raise InvalidArgumentError(
                f"max_index must be non-negative, got {max_index}",
                context={"max_index": max_index},
            )
        num_slots = max_index + 1
        num_excluded = sum(1 for index in excluded if 0 <= index <= max_index)
        num_free = num_slots - num_excluded
        if num_free <= 0:
            raise InvalidArgumentError(
                f"no unselected index left in [0, {max_index}]",
                context={"max_index": max_index, "excluded": num_excluded},
            )

        if num_excluded * 2 <= num_slots:
            while True:
                index = self._rng.randrange(num_slots)
                if index not in excluded:
                    return index

        # dense exclusion: draw from the free slots directly
        free = [index for index in range(num_slots) if index not in excluded]
        return free[self._rng.randrange(len(free))]
