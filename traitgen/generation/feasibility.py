"""Upper bounds on the number of distinct combinations a LayerSet can yield."""

import re
from collections.abc import Iterable

from ..core.errors import InvalidSkipPatternError
from ..core.models import Combination, LayerSet


def compile_skip_patterns(patterns: list[str] | None) -> list[re.Pattern[str]]:
    """Compile skipped-trait patterns.

    Raises:
        InvalidSkipPatternError: If a pattern is not a valid regex.
    """
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns or []:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise InvalidSkipPatternError(pattern, str(e)) from e
    return compiled


def count_combinations(
    layers: LayerSet,
    skipped_traits: list[str] | None = None,
) -> int:
    """Product over layers of the options not matching any skip pattern.

    Each factor is floored at 1: an empty or fully-skipped layer is a
    constant, non-choosing layer and must not zero the product.

    Examples:
        [[a, b], [1, 2, 3]]        -> 6
        [[a, b, c], [1], [x, y, z]] -> 9
        [[], [a, b, c]]            -> 3
    """
    regexes = compile_skip_patterns(skipped_traits)

    total = 1
    for layer in layers:
        if regexes:
            count = sum(
                1 for item in layer if not any(rx.search(item) for rx in regexes)
            )
        else:
            count = len(layer)
        total *= max(count, 1)
    return total


def count_within(combinations: Iterable[Combination], layers: LayerSet) -> int:
    """Count combinations that could have been drawn from this LayerSet.

    Empty layers contribute no position, so a combination belongs to the
    subset when it has one entry per non-empty layer and each entry is an
    option of its layer.
    """
    option_sets = [set(layer) for layer in layers if layer]
    width = len(option_sets)
    return sum(
        1
        for combo in combinations
        if len(combo) == width
        and all(option in options for option, options in zip(combo, option_sets))
    )


def count_overlap(first: LayerSet, second: LayerSet) -> int:
    """Number of combinations both LayerSets can yield.

    Two subsets of one LayerSet only share combinations when the same layers
    are empty in both; otherwise their combinations differ in width.
    """
    total = 1
    for left, right in zip(first, second):
        if bool(left) != bool(right):
            return 0
        if not left:
            continue
        shared = len(set(left) & set(right))
        if not shared:
            return 0
        total *= shared
    return total
