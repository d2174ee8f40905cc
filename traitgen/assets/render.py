"""Parallel rendering of generated combinations into images and metadata.

Each artifact is an independent task: composite its layer images, save the
image, write its metadata. Tasks share nothing but the preloaded ImageCache,
and a failing task is recorded without stopping the others.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeout, as_completed
from pathlib import Path

from pydantic import BaseModel, Field

from ..config import RenderSettings, get_config
from ..core.errors import RenderCancelledError
from ..core.models import CollectionSpec, Combination
from ..utils.callbacks import ArtifactDoneCallback
from ..utils.resource_governor import RenderFootprint, ResourceGovernor
from .compositor import ImageCache, composite, save_image
from .metadata import build_metadata, describe_option, write_metadata


logger = logging.getLogger(__name__)


class ArtifactFailure(BaseModel):
    index: int
    path: str
    error: str


class RenderReport(BaseModel):
    """Outcome of rendering a collection."""

    succeeded: list[int] = Field(default_factory=list)
    failed: list[ArtifactFailure] = Field(default_factory=list)
    workers: int = 1
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failed


def render_artifact(
    index: int,
    combination: Combination,
    spec: CollectionSpec,
    cache: ImageCache,
    stop: threading.Event | None = None,
) -> Path:
    """Write `<index>.png` and `<index>.json` for one combination.

    When `stop` is set once compositing is done, nothing is written and
    RenderCancelledError is raised.
    """
    output = Path(spec.output_path)

    canvas = composite(combination, spec.image.as_tuple(), cache)
    if stop is not None and stop.is_set():
        raise RenderCancelledError(index)

    image_path = output / f"{index}.png"
    save_image(canvas, image_path)

    attributes = [describe_option(path, spec.base_path) for path in combination]
    payload = build_metadata(spec.metadata, attributes, index, spec.image_url)
    write_metadata(payload, output / f"{index}.json")
    return image_path


def resolve_workers(
    settings: RenderSettings,
    requested: int | None = None,
    footprint: RenderFootprint | None = None,
) -> int:
    governor = ResourceGovernor(
        resource_mode=settings.resource_mode, max_memory_gb=settings.max_memory_gb
    )
    wanted = settings.workers if requested is None else requested
    return governor.recommend_workers(wanted, footprint)


def render_collection(
    combinations: list[Combination],
    spec: CollectionSpec,
    *,
    workers: int | None = None,
    timeout: float | None = None,
    cache: ImageCache | None = None,
    settings: RenderSettings | None = None,
    on_done: ArtifactDoneCallback | None = None,
) -> RenderReport:
    """Render every combination, one task per artifact.

    Args:
        combinations: Combinations in output order (list index = file name)
        spec: Collection config (output path, image size, metadata)
        workers: Pool size (None = from settings, 0 = auto)
        timeout: Seconds to wait for the whole batch (None = from settings)
        cache: Decoded image cache to reuse
        settings: Render settings (defaults from config)
        on_done: Optional callback(index, ok) per finished artifact

    Returns:
        RenderReport listing succeeded indices and per-artifact failures.
        When the timeout expires, tasks that have not started are cancelled
        and reported as timed out. Tasks already running are waited for and
        reported by what they did: they either finish writing or stop before
        writing anything.
    """
    settings = settings or get_config().render
    if timeout is None:
        timeout = settings.task_timeout_seconds
    if cache is None:
        cache = ImageCache()

    start = time.time()
    cache.preload(path for combination in combinations for path in combination)
    footprint = RenderFootprint.for_canvas(spec.image.as_tuple(), cache.footprint_bytes())
    pool_size = resolve_workers(settings, workers, footprint)

    report = RenderReport(workers=pool_size)
    output = Path(spec.output_path)

    def record(index: int, error: str | None) -> None:
        if error is None:
            report.succeeded.append(index)
        else:
            report.failed.append(
                ArtifactFailure(index=index, path=str(output / f"{index}.png"), error=error)
            )
        if on_done:
            on_done(index, error is None)

    def collect(future, index: int) -> None:
        try:
            future.result()
        except Exception as e:
            logger.warning("Artifact %d failed: %s", index, e)
            record(index, str(e))
        else:
            record(index, None)

    stop = threading.Event()
    executor = ThreadPoolExecutor(max_workers=pool_size)
    futures = {
        executor.submit(render_artifact, index, combination, spec, cache, stop): index
        for index, combination in enumerate(combinations)
    }
    pending = dict(futures)
    try:
        for future in as_completed(futures, timeout=timeout):
            collect(future, pending.pop(future))
    except FuturesTimeout:
        stop.set()
        running = {}
        for future, index in pending.items():
            if future.cancel():
                logger.warning("Artifact %d did not start within %ss", index, timeout)
                record(index, f"timed out after {timeout}s")
            else:
                running[future] = index
        # running tasks either finish writing or stop before their first write
        for future in as_completed(running):
            collect(future, running[future])
    finally:
        stop.set()
        executor.shutdown(wait=True, cancel_futures=True)

    report.succeeded.sort()
    report.failed.sort(key=lambda failure: failure.index)
    report.elapsed_seconds = time.time() - start
    logger.info(
        "Rendered %d/%d artifacts in %.2fs",
        len(report.succeeded),
        len(combinations),
        report.elapsed_seconds,
    )
    return report
