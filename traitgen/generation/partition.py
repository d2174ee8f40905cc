"""Split layer data by forced-combination rules.

Each rule is a list of (layer, value) constraints. An option's layer is read
from its path: options live either directly in a layer folder
(`<base>/Face/X#25.png`) or in a sub-group folder inside it
(`<base>/Hair/Black#700/Style2#25.png`).
"""

import logging
from dataclasses import dataclass
from pathlib import PurePath

from ..core.models import ForcedCombination, ForcedCombo, LayerSet, SubLayerRef


logger = logging.getLogger(__name__)


@dataclass
class Partition:
    """Per-layer split of a LayerSet; both sides keep the input's length."""

    matched: LayerSet
    unmatched: LayerSet


def _base_name(base_path: str) -> str:
    return PurePath(base_path).name or base_path


def option_value(option_path: str) -> str:
    """File name up to the first '#': 'Face/X#25.png' -> 'X'."""
    return PurePath(option_path).name.split("#", 1)[0]


def option_matches(
    combo: list[ForcedCombo],
    option_path: str,
    base_path: str,
) -> bool:
    """Whether an option satisfies a rule's constraint for its layer.

    Options of layers the rule does not constrain always match.
    """
    path = PurePath(option_path)
    base_name = _base_name(base_path)

    parent_path = path.parent
    parent = parent_path.name or base_name
    grandparent = parent_path.parent.name or base_name

    target_layer = parent if grandparent == base_name else grandparent

    constraint = next((c for c in combo if c.references(target_layer)), None)
    if constraint is None:
        return True

    value = option_value(option_path)
    ref = constraint.layer
    if isinstance(ref, SubLayerRef):
        in_sub_layer = grandparent == ref.main_layer and parent.startswith(
            ref.sub_layer
        )
        if constraint.is_wildcard:
            return in_sub_layer
        return in_sub_layer and value.startswith(constraint.value)

    return parent == ref and value.startswith(constraint.value)


def partition_layers(
    rule: ForcedCombination,
    layers: LayerSet,
    base_path: str,
) -> Partition:
    """Split every layer into options matching the rule and the rest."""
    matched: LayerSet = []
    unmatched: LayerSet = []
    for layer in layers:
        inside: list[str] = []
        outside: list[str] = []
        for option in layer:
            if option_matches(rule.combo, option, base_path):
                inside.append(option)
            else:
                outside.append(option)
        matched.append(inside)
        unmatched.append(outside)
    return Partition(matched=matched, unmatched=unmatched)


def carry_remaining(remaining: LayerSet, unmatched: LayerSet) -> LayerSet:
    """Remove a rule's matched options from the running remainder.

    A layer is only narrowed when the narrowed list is non-empty: a layer
    whose options were all matched keeps its previous remaining content so
    later quotas still have something to draw from.
    """
    carried: LayerSet = []
    for current, outside in zip(remaining, unmatched):
        keep = set(outside)
        narrowed = [option for option in current if option in keep]
        carried.append(narrowed if narrowed else list(current))
    return carried
