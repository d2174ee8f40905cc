"""Typed callback protocols for progress reporting.

These Protocol classes give callbacks a typed signature; plain functions
and lambdas satisfy them by duck typing.
"""

from typing import Protocol


class ItemProgressCallback(Protocol):
    """Callback for item-based progress (combination generator).

    Args:
        current: Number of items completed so far
        total: Total items to produce
    """

    def __call__(self, current: int, total: int) -> None: ...


class ArtifactDoneCallback(Protocol):
    """Callback invoked after each artifact finishes rendering.

    Args:
        index: Output index of the artifact
        ok: False if the artifact failed
    """

    def __call__(self, index: int, ok: bool) -> None: ...
