"""Weighted option sampling over precomputed cumulative tables."""

import bisect
import random

from ..core.models import Layer, WeightTable


def choose_weighted(layer: Layer, table: WeightTable, rng: random.Random) -> str:
    """Draw one option with probability weight(i) / total.

    Draws r uniformly from [0, total) and returns the option owning the first
    cumulative bucket strictly above r.

    Raises:
        ValueError: If the table's total weight is 0 (use uniform choice).
    """
    if table.total <= 0:
        raise ValueError("Weighted choice needs a positive total weight")
    if len(table) != len(layer):
        raise ValueError(
            f"Weight table has {len(table)} entries for {len(layer)} options"
        )

    r = rng.randrange(table.total)
    return layer[bisect.bisect_right(table.cumulative, r)]


def choose_option(layer: Layer, table: WeightTable, rng: random.Random) -> str | None:
    """Pick one option from a layer.

    Empty layers yield None (they contribute no selection), unweighted layers
    are sampled uniformly, everything else goes through choose_weighted.
    """
    if not layer:
        return None
    if table.total == 0:
        return rng.choice(layer)
    return choose_weighted(layer, table, rng)
