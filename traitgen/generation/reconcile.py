"""Reconcile configured layer order with the layer folders found on disk.

Layer folders on disk may carry a `#...` suffix (weights or ordering hints)
that the config does not mention, and directory listings come back in
arbitrary order. The reconciler checks both lists describe the same layers
and returns the on-disk names in configured stacking order.
"""

import logging

from ..core.errors import TraitMismatchError


logger = logging.getLogger(__name__)


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        cur = [i] + [0] * len(b)
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            cur[j] = min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost)
        prev = cur
    return prev[-1]


def strip_layer_suffix(name: str) -> str:
    """Drop everything from the first '#' on: 'Hair#2' -> 'Hair'."""
    return name.split("#", 1)[0]


def closest_index(candidate: str, choices: list[str]) -> int:
    """Index of the choice nearest to candidate; ties go to the first one."""
    best_index = 0
    best_score: int | None = None
    for index, choice in enumerate(choices):
        score = levenshtein(choice, candidate)
        if best_score is None or score < best_score:
            best_score = score
            best_index = index
    return best_index


def _trim_prefix(value: str, prefix: str) -> str:
    if prefix and value.startswith(prefix):
        return value[len(prefix) :]
    return value


def reconcile_layers(
    discovered: list[str],
    configured: list[str],
    base_path: str = "",
) -> list[str]:
    """Validate discovered layer folders against config and order them.

    Args:
        discovered: Layer folder paths found on disk, in any order
        configured: Layer folder paths from config, in stacking order
        base_path: Common prefix ignored when measuring name distance

    Returns:
        The discovered paths, reordered so position i is configured layer i.

    Raises:
        TraitMismatchError: If counts differ, or the suffix-stripped names
            are not the same multiset as the configured names.
    """
    if len(discovered) != len(configured):
        raise TraitMismatchError(
            f"[traits_by_path: {len(discovered)} traits_by_config: {len(configured)}]"
        )

    stripped = sorted(strip_layer_suffix(entry) for entry in discovered)
    if stripped != sorted(configured):
        raise TraitMismatchError(
            "[traits_by_path and traits_by_config are different]"
        )

    targets = [_trim_prefix(entry, base_path) for entry in configured]
    ordered = sorted(
        discovered,
        key=lambda entry: closest_index(_trim_prefix(entry, base_path), targets),
    )
    logger.info("Reconciled layer order: %s", ordered)
    return ordered
