from __future__ import annotations

from collections.abc import Mapping
from typing import Literal, TypeVar

from pydantic import BaseModel, Field, model_validator

TBaseSchema = TypeVar("TBaseSchema", bound="BaseSchema")

MigrationStrategy = Literal["fittest", "uniform", "all"]


class BaseSchema(BaseModel):
    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()

    @classmethod
    def from_json(cls: type[TBaseSchema], data: str) -> TBaseSchema:
        return cls.model_validate_json(data)

    @classmethod
    def from_dict(cls: type[TBaseSchema], data: Mapping[str, object]) -> TBaseSchema:
        return cls.model_validate(data)


class PoolConfig(BaseSchema):
    capacity: int = Field(gt=0)
    seed: int | None = None


class MigrationConfig(BaseSchema):
    strategy: MigrationStrategy = "fittest"
    size: int = Field(default=1, ge=0)
    interval: int = Field(default=0, ge=0)  # 0 disables periodic migration


class IslandConfig(BaseSchema):
    num_islands: int = Field(gt=0)
    pool: PoolConfig
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
    parameters: list[dict[str, object]] = Field(default_factory=list)

    @model_validator(mode="after")
    def parameters_match_islands(self) -> IslandConfig:
        if self.parameters and len(self.parameters) != self.num_islands:
            raise ValueError("parameters length must match num_islands")
        return self
