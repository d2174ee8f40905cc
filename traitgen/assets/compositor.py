"""Image compositing with Pillow.

Source layer images are decoded once into an ImageCache and shared read-only
by every artifact that uses them.
"""

import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from PIL import Image

from ..utils.resource_governor import rgba_bytes


logger = logging.getLogger(__name__)


class ImageCache:
    """Decoded RGBA layer images keyed by file path.

    Call preload() before handing the cache to worker threads; lookups after
    that are read-only. Misses are still decoded lazily under a lock.
    """

    def __init__(self) -> None:
        self._images: dict[str, Image.Image] = {}
        self._lock = threading.Lock()

    def preload(self, paths: Iterable[str]) -> list[tuple[str, Exception]]:
        """Decode every distinct path once.

        Returns (path, error) pairs for files that could not be decoded; the
        artifacts using them fail individually at render time.
        """
        failures: list[tuple[str, Exception]] = []
        for path in sorted(set(paths)):
            if path in self._images:
                continue
            try:
                self._images[path] = self._decode(path)
            except (OSError, ValueError) as e:
                logger.warning("Could not decode %s: %s", path, e)
                failures.append((path, e))
        return failures

    def get(self, path: str) -> Image.Image:
        image = self._images.get(path)
        if image is not None:
            return image
        with self._lock:
            if path not in self._images:
                self._images[path] = self._decode(path)
            return self._images[path]

    @staticmethod
    def _decode(path: str) -> Image.Image:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGBA")

    def footprint_bytes(self) -> int:
        """Decoded size of every cached image, 4 bytes per RGBA pixel."""
        return sum(rgba_bytes(*image.size) for image in self._images.values())

    def __contains__(self, path: object) -> bool:
        return path in self._images

    def __len__(self) -> int:
        return len(self._images)


def composite(
    paths: Iterable[str],
    size: tuple[int, int],
    cache: ImageCache,
) -> Image.Image:
    """Overlay layer images in order at the origin of a transparent canvas."""
    canvas = Image.new("RGBA", size)
    for path in paths:
        layer = cache.get(path)
        if layer.size != size:
            # anchored at the origin: clip overflow, pad with transparency
            layer = layer.crop((0, 0, *size))
        canvas = Image.alpha_composite(canvas, layer)
    return canvas


def save_image(canvas: Image.Image, path: str | Path) -> None:
    """Persist a canvas; the format follows the file suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(path)
