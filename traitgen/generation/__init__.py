"""Trait Combination Generation Engine.

Turns a reconciled LayerSet into a set of unique, weighted combinations,
honoring forced-combination quotas.

Usage:
    from traitgen.generation import reconcile_layers, generate_collection

    ordered = reconcile_layers(discovered, spec.layer_paths(), spec.base_path)
    result = generate_collection(spec, load_layers(ordered), seed=42)
"""

from .weights import DEFAULT_WEIGHT, parse_weight, build_weight_table
from .sampler import choose_weighted, choose_option
from .reconcile import levenshtein, reconcile_layers, strip_layer_suffix
from .feasibility import (
    compile_skip_patterns,
    count_combinations,
    count_overlap,
    count_within,
)
from .partition import (
    Partition,
    option_matches,
    partition_layers,
    carry_remaining,
)
from .core import (
    CombinationSet,
    QuotaPlan,
    fingerprint,
    generate_combinations,
    plan_quotas,
    check_preconditions,
    generate_collection,
)

__all__ = [
    "DEFAULT_WEIGHT",
    "parse_weight",
    "build_weight_table",
    "choose_weighted",
    "choose_option",
    "levenshtein",
    "reconcile_layers",
    "strip_layer_suffix",
    "count_combinations",
    "count_overlap",
    "count_within",
    "compile_skip_patterns",
    "Partition",
    "option_matches",
    "partition_layers",
    "carry_remaining",
    "CombinationSet",
    "QuotaPlan",
    "fingerprint",
    "generate_combinations",
    "plan_quotas",
    "check_preconditions",
    "generate_collection",
]
