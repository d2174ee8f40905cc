"""Worker-count recommendations for the compositing pool.

Rendering holds two kinds of pixel memory: the decoded layer images in the
shared ImageCache, paid once for the whole run, and the canvases each busy
worker stacks layers onto, paid once per worker. The governor sizes the
pool so both fit in a fraction of physical memory, and never above the CPU
count.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 4  # decoded RGBA
GIB = 1024**3
FALLBACK_MEMORY_GB = 8.0
MAX_AUTO_WORKERS = 8

# the canvas and the alpha_composite result are alive at the same time
CANVASES_PER_WORKER = 2


def rgba_bytes(width: int, height: int) -> int:
    return width * height * BYTES_PER_PIXEL


def total_memory_bytes() -> int:
    """Physical memory, or a conservative guess where sysconf is missing."""
    try:
        page_size = os.sysconf("SC_PAGE_SIZE")
        phys_pages = os.sysconf("SC_PHYS_PAGES")
    except (ValueError, OSError, AttributeError):
        return int(FALLBACK_MEMORY_GB * GIB)
    if page_size <= 0 or phys_pages <= 0:
        return int(FALLBACK_MEMORY_GB * GIB)
    return page_size * phys_pages


@dataclass(frozen=True)
class RenderFootprint:
    """Bytes held by a render run: the shared cache plus each worker's canvases."""

    cache_bytes: int
    worker_bytes: int

    @classmethod
    def for_canvas(cls, size: tuple[int, int], cache_bytes: int = 0) -> RenderFootprint:
        return cls(
            cache_bytes=cache_bytes,
            worker_bytes=CANVASES_PER_WORKER * rgba_bytes(*size),
        )


class ResourceGovernor:
    """Caps the render pool by CPU count and by the memory the cache leaves free.

    In "manual" mode the requested count is used as given.
    """

    def __init__(
        self,
        resource_mode: str = "auto",
        max_memory_gb: float | None = None,
        memory_fraction: float = 0.8,
    ):
        self.resource_mode = resource_mode
        self.max_memory_gb = max_memory_gb
        self.memory_fraction = memory_fraction

    def memory_budget_bytes(self) -> int:
        total = total_memory_bytes()
        if self.max_memory_gb:
            total = min(total, int(self.max_memory_gb * GIB))
        return int(total * self.memory_fraction)

    def recommend_workers(
        self,
        requested_workers: int,
        footprint: RenderFootprint | None = None,
    ) -> int:
        """Cap a requested worker count.

        A request of 0 or less means "as many as the machine allows". Without
        a footprint only the CPU cap applies.
        """
        cpu_count = max(1, os.cpu_count() or 1)
        if requested_workers <= 0:
            requested_workers = cpu_count
        if self.resource_mode != "auto":
            return requested_workers

        caps = [requested_workers, min(max(1, cpu_count - 1), MAX_AUTO_WORKERS)]
        if footprint is not None and footprint.worker_bytes > 0:
            spare = self.memory_budget_bytes() - footprint.cache_bytes
            caps.append(spare // footprint.worker_bytes)

        workers = max(1, min(caps))
        logger.debug("Render pool: %d workers (caps %s)", workers, caps)
        return workers
