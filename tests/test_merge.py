from __future__ import annotations

import random
from collections import Counter
from collections.abc import Set

import pytest

from fitpool_core.errors import InvalidArgumentError
from fitpool_core.picker import RandomIndexPicker
from fitpool_core.population import Population


class ScriptedPicker:
    def __init__(self, indices: list[int]) -> None:
        self._indices: list[int] = list(indices)
        self.calls: list[tuple[int, int]] = []

    def pick(self, excluded: Set[int], max_index: int) -> int:
        self.calls.append((len(excluded), max_index))
        return self._indices.pop(0)


def _source() -> Population[int, str]:
    pool: Population[int, str] = Population(10)
    for element, score in [("a", 1), ("b", 2), ("c", 2), ("d", 3)]:
        _ = pool.add(element, score)
    return pool


def _fittest_source() -> Population[int, str]:
    pool: Population[int, str] = Population(10)
    for element, score in [("a", 5), ("b", 5), ("c", 4), ("d", 3)]:
        _ = pool.add(element, score)
    return pool


def test_merge_fittest_takes_whole_buckets_within_budget() -> None:
    destination: Population[int, str] = Population(10)
    merged = _fittest_source().merge_fittest_to(3, destination)
    assert merged == 3
    assert destination.list_elements() == ["a", "b", "c"]


def test_merge_fittest_splits_bucket_that_overflows_budget() -> None:
    destination: Population[int, str] = Population(10)
    merged = _fittest_source().merge_fittest_to(1, destination)
    assert merged == 1
    assert destination.list_elements() == ["a"]


def test_merge_fittest_zero_and_empty() -> None:
    destination: Population[int, str] = Population(10)
    assert _fittest_source().merge_fittest_to(0, destination) == 0
    assert Population(3).merge_fittest_to(5, destination) == 0
    assert len(destination) == 0


def test_merge_fittest_counts_offers_not_survivors() -> None:
    destination: Population[int, str] = Population(1)
    _ = destination.add("z", 100)
    merged = _fittest_source().merge_fittest_to(2, destination)
    assert merged == 2
    assert destination.list_elements() == ["z"]


def test_merge_fittest_never_grows_destination_past_budget() -> None:
    rng = random.Random(9)
    for _ in range(40):
        source: Population[int, str] = Population(20)
        for idx in range(rng.randint(0, 30)):
            _ = source.add(f"s{idx}", rng.randint(0, 6))
        destination: Population[int, str] = Population(rng.randint(1, 20))
        for idx in range(rng.randint(0, 5)):
            _ = destination.add(f"d{idx}", rng.randint(0, 6))

        budget = rng.randint(0, 25)
        before = len(destination)
        merged = source.merge_fittest_to(budget, destination)

        assert merged <= budget
        assert merged <= len(source)
        assert len(destination) - before <= budget


def test_merge_fittest_rejects_negative_count() -> None:
    with pytest.raises(InvalidArgumentError):
        _ = _source().merge_fittest_to(-1, Population(3))


def test_merge_subset_indexes_from_least_fit() -> None:
    destination: Population[int, str] = Population(10)
    merged = _source().merge_subset_to([True, False, True, False], destination)
    assert merged == 2
    assert destination.list_elements() == ["c", "a"]


def test_merge_subset_ignores_bits_past_the_end() -> None:
    destination: Population[int, str] = Population(10)
    merged = _source().merge_subset_to([False, False, False, True, True, True], destination)
    assert merged == 1
    assert destination.list_elements() == ["d"]


def test_merge_subset_with_no_bits_set() -> None:
    destination: Population[int, str] = Population(10)
    assert _source().merge_subset_to([], destination) == 0
    assert _source().merge_subset_to([False] * 4, destination) == 0
    assert len(destination) == 0


def test_merge_subset_rejects_missing_mask() -> None:
    with pytest.raises(InvalidArgumentError):
        _ = _source().merge_subset_to(None, Population(3))  # type: ignore[arg-type]


def test_merge_to_respects_destination_capacity() -> None:
    destination: Population[int, str] = Population(2)
    offered = _source().merge_to(destination)
    assert offered == 4
    assert destination.list_elements() == ["d", "c"]


def test_merge_into_self_is_rejected() -> None:
    pool = _source()
    with pytest.raises(InvalidArgumentError):
        _ = pool.merge_to(pool)
    with pytest.raises(InvalidArgumentError):
        _ = pool.merge_fittest_to(1, pool)
    assert len(pool) == 4


def test_merge_uniform_with_large_count_matches_merge_to() -> None:
    source = _source()
    via_uniform: Population[int, str] = Population(10)
    via_all: Population[int, str] = Population(10)
    picker = ScriptedPicker([])

    merged = source.merge_uniform_to(10, picker, via_uniform)
    _ = source.merge_to(via_all)

    assert merged == 4
    assert picker.calls == []
    assert Counter(via_uniform.items()) == Counter(via_all.items())


def test_merge_uniform_uses_picker_indices() -> None:
    destination: Population[int, str] = Population(10)
    picker = ScriptedPicker([3, 0])

    merged = _source().merge_uniform_to(2, picker, destination)

    assert merged == 2
    assert picker.calls == [(0, 3), (1, 3)]
    assert destination.list_elements() == ["d", "a"]


def test_merge_uniform_rejects_bad_picker_output() -> None:
    destination: Population[int, str] = Population(10)
    with pytest.raises(InvalidArgumentError):
        _ = _source().merge_uniform_to(1, ScriptedPicker([4]), destination)
    with pytest.raises(InvalidArgumentError):
        _ = _source().merge_uniform_to(2, ScriptedPicker([1, 1]), destination)
    assert len(destination) == 0


def test_merge_uniform_random_sample_is_distinct() -> None:
    source: Population[int, str] = Population(30)
    for idx in range(30):
        _ = source.add(f"e{idx}", idx % 7)
    destination: Population[int, str] = Population(30)

    merged = source.merge_uniform_to(12, RandomIndexPicker.seeded(4), destination)

    assert merged == 12
    assert len(destination) == 12
    assert set(destination.items()) <= set(source.items())
