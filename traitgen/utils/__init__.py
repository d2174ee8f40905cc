"""Pure utility modules for traitgen.

- callbacks: Typed progress callback protocols
- resource_governor: Render pool sizing from CPU count and image memory
"""

from .callbacks import ItemProgressCallback, ArtifactDoneCallback
from .resource_governor import RenderFootprint, ResourceGovernor

__all__ = [
    "ItemProgressCallback",
    "ArtifactDoneCallback",
    "RenderFootprint",
    "ResourceGovernor",
]
