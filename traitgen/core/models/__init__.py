"""All Pydantic models for traitgen.

- collection.py: Collection config (layers, image size, forced combinations)
- generation.py: Engine outputs (weight tables, results, statistics)
"""

from .collection import (
    WILDCARD_VALUE,
    SubLayerRef,
    LayerRef,
    ForcedCombo,
    ForcedCombination,
    ImageSize,
    CollectionSpec,
)
from .generation import (
    Layer,
    LayerSet,
    Combination,
    WeightTable,
    QuotaStats,
    GenerationStats,
    GenerationResult,
)

__all__ = [
    # Collection
    "WILDCARD_VALUE",
    "SubLayerRef",
    "LayerRef",
    "ForcedCombo",
    "ForcedCombination",
    "ImageSize",
    "CollectionSpec",
    # Generation
    "Layer",
    "LayerSet",
    "Combination",
    "WeightTable",
    "QuotaStats",
    "GenerationStats",
    "GenerationResult",
]
