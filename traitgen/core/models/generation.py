"""Models produced by the combination engine."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


Layer = list[str]
LayerSet = list[list[str]]
Combination = tuple[str, ...]


class WeightTable(BaseModel):
    """Cumulative weights for one layer, aligned with the layer's option order.

    A total of 0 marks the layer as unweighted (sampled uniformly).
    """

    model_config = ConfigDict(frozen=True)

    cumulative: tuple[int, ...] = ()
    total: int = 0

    def __len__(self) -> int:
        return len(self.cumulative)


class QuotaStats(BaseModel):
    """Outcome of one quota (a forced rule or the residual)."""

    name: str
    requested: int
    accepted: int = 0
    attempts: int = 0
    ceiling: int = 0


class GenerationStats(BaseModel):
    """Statistics collected while generating a collection."""

    ceiling: int = 0
    quotas: list[QuotaStats] = Field(default_factory=list)
    # layer index -> option -> number of accepted combinations using it
    option_counts: dict[int, dict[str, int]] = Field(default_factory=dict)

    @property
    def total_attempts(self) -> int:
        return sum(q.attempts for q in self.quotas)


class GenerationResult(BaseModel):
    """Result of generating a collection.

    combinations maps each combination's 64-bit fingerprint to its ordered
    trait options, in output order.
    """

    combinations: dict[int, Combination]
    meta: dict[str, Any] = Field(default_factory=dict)
    stats: GenerationStats = Field(default_factory=GenerationStats)

    def ordered(self) -> list[Combination]:
        """Combinations in output order (index 0 first)."""
        return list(self.combinations.values())
