from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Generic

from .errors import InvalidArgumentError
from .picker import IndexPicker, RandomIndexPicker
from .population import ElementT, FitnessT, Population
from .schemas import IslandConfig, MigrationConfig, MigrationStrategy
from .validation import require_non_negative, require_positive

logger = logging.getLogger(__name__)


@dataclass
class Island(Generic[FitnessT, ElementT]):
    population: Population[FitnessT, ElementT]
    parameters: dict[str, object]


class IslandManager(Generic[FitnessT, ElementT]):
    """One pool per worker, exchanging candidates around a ring."""

    def __init__(
        self,
        num_islands: int,
        population_factory: Callable[[], Population[FitnessT, ElementT]],
        island_parameters: list[dict[str, object]] | None = None,
        picker: IndexPicker | None = None,
        migration: MigrationConfig | None = None,
    ) -> None:
        if num_islands <= 0:
            raise InvalidArgumentError("num_islands must be positive")
        if island_parameters is None:
            island_parameters = [{} for _ in range(num_islands)]
        if len(island_parameters) != num_islands:
            raise InvalidArgumentError("island_parameters length must match num_islands")
        self._picker: IndexPicker = picker or RandomIndexPicker()
        self.migration: MigrationConfig = migration or MigrationConfig()
        self._islands: list[Island[FitnessT, ElementT]] = []
        for idx in range(num_islands):
            self._islands.append(Island(population_factory(), dict(island_parameters[idx])))

    @classmethod
    def from_config(cls, config: IslandConfig) -> IslandManager[FitnessT, ElementT]:
        capacity = config.pool.capacity

        def _factory() -> Population[FitnessT, ElementT]:
            return Population(capacity)

        return cls(
            num_islands=config.num_islands,
            population_factory=_factory,
            island_parameters=config.parameters or None,
            picker=RandomIndexPicker(random.Random(config.pool.seed)),
            migration=config.migration,
        )

    @property
    def islands(self) -> tuple[Island[FitnessT, ElementT], ...]:
        return tuple(self._islands)

    @property
    def populations(self) -> tuple[Population[FitnessT, ElementT], ...]:
        return tuple(island.population for island in self._islands)

    def get_population(self, index: int) -> Population[FitnessT, ElementT]:
        return self._islands[index].population

    def get_parameters(self, index: int) -> dict[str, object]:
        return dict(self._islands[index].parameters)

    def migrate(self, num_migrants: int = 1, strategy: MigrationStrategy = "fittest") -> int:
        """Send migrants from each island to the next one around the ring.

        Every island's migrants are chosen before any island receives, so an
        island never forwards candidates it received in the same round.
        Returns the number of migrants offered across all islands.
        """
        require_non_negative(num_migrants, "num_migrants")
        if num_migrants == 0 or len(self._islands) < 2:
            return 0

        staged: list[Population[FitnessT, ElementT]] = []
        migrated = 0
        for island in self._islands:
            source = island.population
            outbox: Population[FitnessT, ElementT] = Population(source.capacity)
            if strategy == "fittest":
                migrated += source.merge_fittest_to(num_migrants, outbox)
            elif strategy == "uniform":
                migrated += source.merge_uniform_to(num_migrants, self._picker, outbox)
            elif strategy == "all":
                migrated += source.merge_to(outbox)
            else:
                raise InvalidArgumentError(f"unknown migration strategy: {strategy!r}")
            staged.append(outbox)

        for idx, outbox in enumerate(staged):
            target = self._islands[(idx + 1) % len(self._islands)].population
            outbox.merge_to(target)

        logger.info(f"Migrated {migrated} candidate(s) across {len(self._islands)} islands ({strategy})")
        return migrated

    def collect(self, capacity: int) -> Population[FitnessT, ElementT]:
        """Merge every island into a fresh pool holding at most ``capacity`` elements."""
        require_positive(capacity, "capacity")
        combined: Population[FitnessT, ElementT] = Population(capacity)
        for island in self._islands:
            island.population.merge_to(combined)
        return combined

    def best_score(self) -> FitnessT | None:
        scores = [
            score
            for score in (island.population.best_score() for island in self._islands)
            if score is not None
        ]
        return max(scores) if scores else None

    def get_stats(self) -> dict[int, dict[str, object]]:
        return {idx: island.population.get_stats() for idx, island in enumerate(self._islands)}

    def maybe_migrate(self, generation_index: int) -> int:
        """Run the configured migration when ``generation_index`` closes an interval."""
        interval = self.migration.interval
        if interval <= 0 or (generation_index + 1) % interval != 0:
            return 0
        return self.migrate(self.migration.size, self.migration.strategy)
