from __future__ import annotations

import bisect
import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Generic, Protocol, TypeVar

from .errors import InvalidArgumentError, LogicalInconsistencyError
from .picker import IndexPicker
from .validation import (
    require_in_range,
    require_non_negative,
    require_not_none,
    require_ordered,
    require_positive,
)

logger = logging.getLogger(__name__)


class SupportsOrdering(Protocol):
    def __lt__(self, other: Any, /) -> bool:
        ...


FitnessT = TypeVar("FitnessT", bound=SupportsOrdering)
ElementT = TypeVar("ElementT")


class Population(Generic[FitnessT, ElementT]):
    """Bounded container of elements ranked by fitness, best retained.

    Elements sharing an exact score live in one bucket, kept in insertion
    order. Buckets are kept sorted by ascending score. An element equal to one
    already in the same bucket is dropped; equal elements under different
    scores are both kept.

    The pool never holds more than ``capacity`` elements: every mutating call
    ends with a cull that discards the lowest-scoring elements first, and, for
    the lowest bucket, the earliest-inserted ones first.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity: int = require_positive(capacity, "capacity")
        self._size: int = 0
        # parallel lists: _scores[i] is the key of _buckets[i], ascending
        self._scores: list[FitnessT] = []
        self._buckets: list[list[ElementT]] = []

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[ElementT]:
        return iter(self.list_elements())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(capacity={self._capacity}, size={self._size}, "
            f"best={self.best_score()!r}, worst={self.worst_score()!r})"
        )

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self.set_capacity(value)

    def get_capacity(self) -> int:
        return self._capacity

    def is_full(self) -> bool:
        return self._size >= self._capacity

    def add(self, element: ElementT, score: FitnessT) -> bool:
        """Insert ``element`` under ``score``.

        Returns False without touching the pool when the pool is full and
        ``score`` does not beat the current worst score, or when an equal
        element already sits in the bucket for ``score``.
        """
        require_not_none(element, "element")
        score = require_ordered(score)

        if self._rejects(score):
            return False

        index, found = self._locate(score)
        if found:
            bucket = self._buckets[index]
            if element in bucket:
                logger.debug(f"Dropped duplicate element at score {score!r}")
                return False
            bucket.append(element)
        else:
            self._scores.insert(index, score)
            self._buckets.insert(index, [element])
        self._size += 1

        self.cull(self._capacity)
        return True

    def add_all(self, elements: Sequence[ElementT], score: FitnessT) -> int:
        """Insert a batch of elements sharing one score.

        The fullness check runs once, against the state before the batch, so
        the batch may overfill the pool before the final cull trims it back.
        Returns the number of elements inserted before culling.
        """
        require_not_none(elements, "elements")
        batch = list(elements)
        for position, element in enumerate(batch):
            require_not_none(element, f"elements[{position}]")
        score = require_ordered(score)

        if self._rejects(score):
            return 0

        index, found = self._locate(score)
        bucket: list[ElementT] = self._buckets[index] if found else []
        num_added = 0
        for element in batch:
            if element not in bucket:
                bucket.append(element)
                num_added += 1
        if not found and bucket:
            self._scores.insert(index, score)
            self._buckets.insert(index, bucket)
        self._size += num_added

        self.cull(self._capacity)
        return num_added

    def best_score(self) -> FitnessT | None:
        if not self._scores:
            return None
        return self._scores[-1]

    def worst_score(self) -> FitnessT | None:
        if not self._scores:
            return None
        return self._scores[0]

    def fittest(self) -> ElementT | None:
        """Return the earliest-inserted element of the best bucket, if any."""
        if not self._buckets:
            return None
        return self._buckets[-1][0]

    def cull(self, target_size: int) -> None:
        """Discard lowest-fitness elements until at most ``target_size`` remain."""
        require_non_negative(target_size, "target_size")

        removed = 0
        while self._size > target_size:
            bucket = self._buckets[0]
            bucket_size = len(bucket)
            if bucket_size == 0:
                raise LogicalInconsistencyError(
                    "empty bucket in population",
                    context={"score": self._scores[0]},
                )
            if self._size - bucket_size >= target_size:
                del self._scores[0]
                del self._buckets[0]
                self._size -= bucket_size
                removed += bucket_size
            else:
                excess = self._size - target_size
                del bucket[:excess]
                self._size -= excess
                removed += excess

        if removed:
            logger.debug(f"Culled {removed} element(s), {self._size} remain")
        self._check_size()

    def list_elements(self) -> list[ElementT]:
        """Snapshot of all elements, best score first, insertion order within a score."""
        result: list[ElementT] = []
        for bucket in reversed(self._buckets):
            result.extend(bucket)
        return result

    def items(self) -> list[tuple[FitnessT, ElementT]]:
        """Like :meth:`list_elements`, paired with each element's score."""
        result: list[tuple[FitnessT, ElementT]] = []
        for score, bucket in zip(reversed(self._scores), reversed(self._buckets)):
            result.extend((score, element) for element in bucket)
        return result

    def merge_fittest_to(self, max_count: int, destination: Population[FitnessT, ElementT]) -> int:
        """Offer up to ``max_count`` of the best elements to ``destination``.

        Whole buckets go over as batches while they fit in the budget; the
        first bucket that does not fit contributes its earliest elements one at
        a time. The return value counts elements offered, some of which the
        destination may have rejected.
        """
        require_non_negative(max_count, "max_count")
        self._check_destination(destination)

        num_merged = 0
        for score, bucket in self._descending_snapshot():
            if num_merged + len(bucket) <= max_count:
                destination.add_all(bucket, score)
                num_merged += len(bucket)
            else:
                for element in bucket[: max_count - num_merged]:
                    destination.add(element, score)
                    num_merged += 1
                break

        logger.debug(f"Merged {num_merged} fittest element(s) of at most {max_count}")
        return num_merged

    def merge_subset_to(
        self,
        selection_mask: Iterable[bool],
        destination: Population[FitnessT, ElementT],
    ) -> int:
        """Offer the elements whose mask bit is set to ``destination``.

        Bit 0 denotes the least-fit element: indices run over buckets in
        ascending score, and within a bucket in insertion order. Bits beyond
        the last element are ignored.
        """
        require_not_none(selection_mask, "selection_mask")
        self._check_destination(destination)

        selected = [index for index, bit in enumerate(selection_mask) if bit]
        if not selected:
            return 0

        num_merged = 0
        cursor = 0
        next_selected = selected[cursor]
        current_index = 0
        for score, bucket in self._ascending_snapshot():
            if current_index + len(bucket) <= next_selected:
                current_index += len(bucket)
                continue
            for element in bucket:
                if current_index == next_selected:
                    destination.add(element, score)
                    num_merged += 1
                    cursor += 1
                    if cursor == len(selected):
                        return num_merged
                    next_selected = selected[cursor]
                current_index += 1

        # more bits set than elements
        return num_merged

    def merge_uniform_to(
        self,
        max_count: int,
        picker: IndexPicker,
        destination: Population[FitnessT, ElementT],
    ) -> int:
        """Offer a uniform sample of ``min(max_count, size)`` elements to ``destination``."""
        require_non_negative(max_count, "max_count")
        require_not_none(picker, "picker")
        self._check_destination(destination)

        num_elements = self._size
        if max_count >= num_elements:
            self.merge_to(destination)
            return num_elements

        last_index = num_elements - 1
        chosen: set[int] = set()
        for _ in range(max_count):
            index = picker.pick(chosen, last_index)
            require_in_range(index, 0, last_index, "picked index")
            if index in chosen:
                raise InvalidArgumentError(
                    f"picker returned already-selected index {index}",
                    context={"index": index},
                )
            chosen.add(index)

        mask = [index in chosen for index in range(num_elements)]
        return self.merge_subset_to(mask, destination)

    def merge_to(self, destination: Population[FitnessT, ElementT]) -> int:
        """Offer every element to ``destination``, one batch per bucket."""
        self._check_destination(destination)

        num_offered = 0
        for score, bucket in self._ascending_snapshot():
            destination.add_all(bucket, score)
            num_offered += len(bucket)
        logger.debug(f"Merged all {num_offered} element(s)")
        return num_offered

    def set_capacity(self, new_capacity: int) -> None:
        self._capacity = require_positive(new_capacity, "new_capacity")
        self.cull(self._capacity)

    def get_stats(self) -> dict[str, object]:
        return {
            "count": self._size,
            "capacity": self._capacity,
            "buckets": len(self._buckets),
            "best_score": self.best_score(),
            "worst_score": self.worst_score(),
        }

    def check_invariants(self) -> None:
        """Audit the full bucket structure, raising LogicalInconsistencyError on a defect."""
        if len(self._scores) != len(self._buckets):
            raise LogicalInconsistencyError(
                "score keys and buckets are out of step",
                context={"scores": len(self._scores), "buckets": len(self._buckets)},
            )
        for index, bucket in enumerate(self._buckets):
            if not bucket:
                raise LogicalInconsistencyError(
                    "empty bucket in population",
                    context={"score": self._scores[index]},
                )
        for lower, upper in zip(self._scores, self._scores[1:]):
            if not lower < upper:
                raise LogicalInconsistencyError(
                    "bucket scores are not strictly ascending",
                    context={"lower": lower, "upper": upper},
                )
        total = sum(len(bucket) for bucket in self._buckets)
        if total != self._size:
            raise LogicalInconsistencyError(
                f"size {self._size} disagrees with bucket total {total}",
                context={"size": self._size, "total": total},
            )
        self._check_size()

    def _rejects(self, score: FitnessT) -> bool:
        if self._size < self._capacity:
            return False
        worst = self._scores[0]
        if worst < score:
            return False
        logger.debug(f"Rejected score {score!r}: pool full and worst score is {worst!r}")
        return True

    def _locate(self, score: FitnessT) -> tuple[int, bool]:
        index = bisect.bisect_left(self._scores, score)
        found = index < len(self._scores) and not score < self._scores[index]
        return index, found

    def _ascending_snapshot(self) -> list[tuple[FitnessT, list[ElementT]]]:
        return [(score, list(bucket)) for score, bucket in zip(self._scores, self._buckets)]

    def _descending_snapshot(self) -> list[tuple[FitnessT, list[ElementT]]]:
        return list(reversed(self._ascending_snapshot()))

    def _check_destination(self, destination: Population[FitnessT, ElementT]) -> None:
        require_not_none(destination, "destination")
        if destination is self:
            raise InvalidArgumentError("cannot merge a population into itself")

    def _check_size(self) -> None:
        if self._size < 0 or self._size > self._capacity:
            raise LogicalInconsistencyError(
                f"size {self._size} outside [0, {self._capacity}]",
                context={"size": self._size, "capacity": self._capacity},
            )
        if self._size < len(self._buckets):
            raise LogicalInconsistencyError(
                "fewer elements than buckets",
                context={"size": self._size, "buckets": len(self._buckets)},
            )
