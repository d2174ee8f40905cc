"""Unique combination generation for a collection.

The engine is a plain interpreter of a CollectionSpec and a LayerSet:

1. Check preconditions (quota percentages, feasibility ceilings) before any
   draw happens.
2. For each forced-combination rule, draw its quota from the options the
   rule matches, then narrow the running remainder.
3. Draw the residual quota from whatever remains.

All quotas share one CombinationSet, so a combination drawn twice by
different quotas is simply drawn again and the final size is exact.
"""

import hashlib
import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..config import GenerationSettings, get_config
from ..core.errors import (
    GenerationStalledError,
    InfeasibleTotalSupplyError,
    QuotaOverflowError,
    TraitMismatchError,
)
from ..core.models import (
    CollectionSpec,
    Combination,
    GenerationResult,
    GenerationStats,
    LayerSet,
    QuotaStats,
)
from ..utils.callbacks import ItemProgressCallback
from .feasibility import count_combinations, count_overlap, count_within
from .partition import carry_remaining, partition_layers
from .sampler import choose_option
from .weights import build_weight_table


logger = logging.getLogger(__name__)


# =============================================================================
# Fingerprints and the uniqueness set
# =============================================================================


def fingerprint(combination: Combination) -> int:
    """64-bit fingerprint of an ordered combination."""
    digest = hashlib.blake2b(
        "\x1f".join(combination).encode("utf-8"), digest_size=8
    ).digest()
    return int.from_bytes(digest, "big")


class CombinationSet:
    """Accepted combinations keyed by fingerprint.

    Uniqueness is decided on the full ordered tuple; the fingerprint is only
    the exposed key. A different combination whose fingerprint is already
    taken is rejected so that keys never alias two combinations.
    """

    def __init__(self) -> None:
        self._by_fingerprint: dict[int, Combination] = {}
        self._members: set[Combination] = set()

    def add(self, combination: Combination) -> bool:
        """Insert a combination; returns False if it was not accepted."""
        if combination in self._members:
            return False
        key = fingerprint(combination)
        if key in self._by_fingerprint:
            logger.debug(
                "Fingerprint collision on %016x, redrawing %s", key, combination
            )
            return False
        self._by_fingerprint[key] = combination
        self._members.add(combination)
        return True

    def items(self) -> list[tuple[int, Combination]]:
        return list(self._by_fingerprint.items())

    def as_dict(self) -> dict[int, Combination]:
        return dict(self._by_fingerprint)

    def __contains__(self, combination: object) -> bool:
        return combination in self._members

    def __iter__(self):
        return iter(self._by_fingerprint.values())

    def __len__(self) -> int:
        return len(self._by_fingerprint)


# =============================================================================
# Drawing
# =============================================================================


def _attempt_ceiling(target: int, settings: GenerationSettings) -> int:
    return max(settings.min_attempts, target * settings.max_attempts_per_item)


def _fill(
    layers: LayerSet,
    target: int,
    rng: random.Random,
    accepted: CombinationSet,
    max_attempts: int,
    name: str,
    on_accept: ItemProgressCallback | None = None,
) -> int:
    """Grow `accepted` by `target` combinations drawn from `layers`.

    Returns the number of draws it took.
    """
    if target <= 0:
        return 0

    space = count_combinations(layers)
    available = space - count_within(accepted, layers)
    if target > available:
        raise InfeasibleTotalSupplyError(target, available, name)

    tables = [build_weight_table(layer) for layer in layers]
    goal = len(accepted) + target
    attempts = 0

    while len(accepted) < goal:
        if attempts >= max_attempts:
            raise GenerationStalledError(
                target, target - (goal - len(accepted)), attempts
            )
        attempts += 1

        candidate = tuple(
            choice
            for layer, table in zip(layers, tables)
            if (choice := choose_option(layer, table, rng)) is not None
        )
        if accepted.add(candidate) and on_accept:
            on_accept(target - (goal - len(accepted)), target)

    return attempts


def generate_combinations(
    layers: LayerSet,
    target: int,
    rng: random.Random,
    *,
    accepted: CombinationSet | None = None,
    max_attempts: int | None = None,
    on_progress: ItemProgressCallback | None = None,
) -> CombinationSet:
    """Draw `target` new distinct combinations from a LayerSet.

    Each draw picks one option per non-empty layer (weighted, or uniform for
    unweighted layers) in LayerSet order.

    Args:
        layers: Options per layer, in stacking order
        target: Number of new combinations to accept
        rng: Randomness source
        accepted: Existing set to extend (combinations in it are not redrawn)
        max_attempts: Draw ceiling (defaults from config)
        on_progress: Optional callback(current, total) per accepted combination

    Returns:
        The CombinationSet holding the new combinations (and `accepted`'s).

    Raises:
        InfeasibleTotalSupplyError: If the LayerSet cannot yield `target` more
            distinct combinations. Raised before the first draw.
        GenerationStalledError: If max_attempts draws pass first.
    """
    combinations = accepted if accepted is not None else CombinationSet()
    if max_attempts is None:
        max_attempts = _attempt_ceiling(target, get_config().generation)
    _fill(layers, target, rng, combinations, max_attempts, "layers", on_progress)
    return combinations


# =============================================================================
# Quota planning
# =============================================================================


@dataclass
class QuotaPlan:
    """One slice of the total supply and the LayerSet it is drawn from.

    `available` is the ceiling less what earlier quotas may already have
    taken from this LayerSet.
    """

    name: str
    layers: LayerSet
    quota: int
    ceiling: int
    available: int


def _net_available(
    layers: LayerSet, ceiling: int, earlier: list[QuotaPlan]
) -> int:
    taken = sum(
        min(plan.quota, count_overlap(plan.layers, layers)) for plan in earlier
    )
    return max(ceiling - taken, 0)


def _require_every_layer(
    name: str, matched: LayerSet, layers: LayerSet, spec: CollectionSpec
) -> None:
    for position, (subset, layer) in enumerate(zip(matched, layers)):
        if layer and not subset:
            folder = (
                spec.layer_folders[position]
                if position < len(spec.layer_folders)
                else f"#{position}"
            )
            raise TraitMismatchError(
                f"{name} matches no option in layer {folder}"
            )


def plan_quotas(spec: CollectionSpec, layers: LayerSet) -> list[QuotaPlan]:
    """Split total supply into forced-rule quotas plus the residual.

    Rule quotas are floor(total * percentage / 100) in declared order, each
    drawn from the options the rule matches. The residual is drawn from what
    is left once every rule has removed its matched options.

    Raises:
        TraitMismatchError: If a rule leaves a non-empty layer with no
            matching option.
    """
    total = spec.total_supply
    plans: list[QuotaPlan] = []
    remaining: LayerSet = [list(layer) for layer in layers]

    for index, rule in enumerate(spec.forced_combinations):
        name = f"forced[{index}]"
        partition = partition_layers(rule, layers, spec.base_path)
        _require_every_layer(name, partition.matched, layers, spec)
        remaining = carry_remaining(remaining, partition.unmatched)
        ceiling = count_combinations(partition.matched, spec.skipped_traits)
        plans.append(
            QuotaPlan(
                name=name,
                layers=partition.matched,
                quota=rule.quota(total),
                ceiling=ceiling,
                available=_net_available(partition.matched, ceiling, plans),
            )
        )

    residual = total - sum(plan.quota for plan in plans)
    ceiling = count_combinations(remaining, spec.skipped_traits)
    plans.append(
        QuotaPlan(
            name="residual",
            layers=remaining,
            quota=max(residual, 0),
            ceiling=ceiling,
            available=_net_available(remaining, ceiling, plans),
        )
    )
    return plans


def check_preconditions(
    spec: CollectionSpec,
    layers: LayerSet,
    plans: list[QuotaPlan],
) -> int:
    """Fail fast on anything that would make generation impossible.

    A quota is checked against its LayerSet's ceiling less the combinations
    earlier quotas could have drawn from the same LayerSet, so a plan that
    passes here cannot run out of room part-way through, whatever the seed.

    Returns:
        The feasibility ceiling of the full LayerSet.

    Raises:
        QuotaOverflowError: If forced percentages sum above 100.
        InfeasibleTotalSupplyError: If the collection or any quota asks for
            more combinations than its LayerSet can yield.
    """
    if spec.total_percentage > 100:
        raise QuotaOverflowError(spec.total_percentage)

    ceiling = count_combinations(layers, spec.skipped_traits)
    logger.info(
        "The number of possible permutations for %d layers is: %d.",
        len(layers),
        ceiling,
    )
    if spec.total_supply > ceiling:
        raise InfeasibleTotalSupplyError(spec.total_supply, ceiling, "collection")

    for plan in plans:
        if plan.quota > plan.available:
            raise InfeasibleTotalSupplyError(plan.quota, plan.available, plan.name)

    return ceiling


# =============================================================================
# Collection
# =============================================================================


def generate_collection(
    spec: CollectionSpec,
    layers: LayerSet,
    *,
    seed: int | None = None,
    settings: GenerationSettings | None = None,
    on_progress: ItemProgressCallback | None = None,
) -> GenerationResult:
    """Generate spec.total_supply unique combinations from a LayerSet.

    Args:
        spec: Collection config (total supply, forced rules, skip patterns)
        layers: Reconciled options per layer, in stacking order
        seed: Random seed for reproducibility (None = random)
        settings: Draw ceiling tuning (defaults from config)
        on_progress: Optional callback(current, total) for progress updates

    Returns:
        GenerationResult whose combinations are shuffled into output order.

    Raises:
        QuotaOverflowError: If forced percentages sum above 100.
        InfeasibleTotalSupplyError: If the requested supply is not reachable.
        GenerationStalledError: If a quota exhausts its draw ceiling.
    """
    settings = settings or get_config().generation
    total = spec.total_supply

    plans = plan_quotas(spec, layers)
    ceiling = check_preconditions(spec, layers, plans)

    if seed is None:
        seed = random.randint(0, 2**31 - 1)
    rng = random.Random(seed)

    accepted = CombinationSet()
    stats = GenerationStats(ceiling=ceiling)

    for plan in plans:
        quota_stats = QuotaStats(
            name=plan.name, requested=plan.quota, ceiling=plan.ceiling
        )
        done_before = len(accepted)

        def on_accept(current: int, _total: int, _offset: int = done_before) -> None:
            if on_progress:
                on_progress(_offset + current, total)

        quota_stats.attempts = _fill(
            plan.layers,
            plan.quota,
            rng,
            accepted,
            _attempt_ceiling(plan.quota, settings),
            plan.name,
            on_accept,
        )
        quota_stats.accepted = len(accepted) - done_before
        stats.quotas.append(quota_stats)
        logger.info(
            "Quota %s: %d/%d combinations in %d draws",
            plan.name,
            quota_stats.accepted,
            plan.quota,
            quota_stats.attempts,
        )

    ordered = accepted.items()
    rng.shuffle(ordered)

    for _, combination in ordered:
        for position, option in enumerate(combination):
            counts = stats.option_counts.setdefault(position, {})
            counts[option] = counts.get(option, 0) + 1

    meta: dict[str, Any] = {
        "count": len(ordered),
        "total_supply": total,
        "seed": seed,
        "layer_count": len(layers),
        "ceiling": ceiling,
        "forced_rules": len(spec.forced_combinations),
        "generated_at": datetime.now().isoformat(),
    }

    return GenerationResult(combinations=dict(ordered), meta=meta, stats=stats)
