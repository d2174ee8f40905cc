"""Rarity weights encoded in trait option file names.

An option's weight is written into its path with `#<digits>` markers, e.g.
`Face/BasilSynth_V1#25.png`. Markers anywhere in the path are summed, so a
sub-group folder weight adds to the file weight:
`Hair/Black#700/Style2#25.png` weighs 725.
"""

import re

from ..core.models import Layer, WeightTable


DEFAULT_WEIGHT = 1

_WEIGHT_MARKER = re.compile(r"#(\d+)")


def parse_weight(option: str) -> int:
    """Sum every `#<digits>` marker in an option identifier.

    Returns DEFAULT_WEIGHT when the identifier carries no marker. A bare `#`
    with no digits is not a marker.
    """
    markers = _WEIGHT_MARKER.findall(option)
    if not markers:
        return DEFAULT_WEIGHT
    return sum(int(marker) for marker in markers)


def build_weight_table(layer: Layer) -> WeightTable:
    """Build the cumulative weight table for a layer.

    Options without a marker contribute DEFAULT_WEIGHT to the running total,
    so every option keeps a reachable bucket.

    Example:
        ["a#100.png", "b#25.png", "c#50.png", "d.png"]
        -> cumulative (100, 125, 175, 176), total 176
    """
    cumulative: list[int] = []
    total = 0
    for option in layer:
        total += parse_weight(option)
        cumulative.append(total)
    return WeightTable(cumulative=tuple(cumulative), total=total)


