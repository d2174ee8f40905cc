"""traitgen: unique trait-combination generator for layered image collections.

Usage:
    from traitgen import CollectionSpec, generate_collection, load_layers

    spec = CollectionSpec.from_file("config.json")
    layers = load_layers(spec.layer_paths())
    result = generate_collection(spec, layers, seed=42)
"""

__version__ = "0.1.0"

from .core.errors import (
    TraitgenError,
    DirectoryUnreadableError,
    TraitMismatchError,
    QuotaOverflowError,
    InfeasibleTotalSupplyError,
    GenerationStalledError,
    InvalidSkipPatternError,
    RenderCancelledError,
)
from .core.models import (
    CollectionSpec,
    ForcedCombination,
    ForcedCombo,
    GenerationResult,
    ImageSize,
    SubLayerRef,
    WeightTable,
)
from .assets.discovery import load_layers
from .generation import (
    CombinationSet,
    count_combinations,
    generate_collection,
    generate_combinations,
    reconcile_layers,
)

__all__ = [
    "__version__",
    # Errors
    "TraitgenError",
    "DirectoryUnreadableError",
    "TraitMismatchError",
    "QuotaOverflowError",
    "InfeasibleTotalSupplyError",
    "GenerationStalledError",
    "InvalidSkipPatternError",
    "RenderCancelledError",
    # Models
    "CollectionSpec",
    "ForcedCombination",
    "ForcedCombo",
    "GenerationResult",
    "ImageSize",
    "SubLayerRef",
    "WeightTable",
    # Engine
    "CombinationSet",
    "count_combinations",
    "generate_collection",
    "generate_combinations",
    "reconcile_layers",
    "load_layers",
]
