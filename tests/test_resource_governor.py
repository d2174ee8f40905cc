"""Tests for render pool sizing."""

from traitgen.utils import resource_governor
from traitgen.utils.resource_governor import GIB, RenderFootprint, ResourceGovernor


MIB = 1024**2


def _governor(monkeypatch, cpus: int, memory_bytes: int, **kwargs) -> ResourceGovernor:
    monkeypatch.setattr(resource_governor.os, "cpu_count", lambda: cpus)
    monkeypatch.setattr(resource_governor, "total_memory_bytes", lambda: memory_bytes)
    return ResourceGovernor(**kwargs)


def test_footprint_for_canvas():
    footprint = RenderFootprint.for_canvas((4, 4), cache_bytes=100)
    assert footprint.cache_bytes == 100
    # canvas plus composite result, 4 bytes per pixel each
    assert footprint.worker_bytes == 2 * 4 * 4 * 4


def test_manual_mode_returns_request(monkeypatch):
    governor = _governor(monkeypatch, 16, GIB, resource_mode="manual")
    big = RenderFootprint.for_canvas((8192, 8192), cache_bytes=GIB)
    assert governor.recommend_workers(12, big) == 12


def test_zero_request_means_cpu_count(monkeypatch):
    governor = _governor(monkeypatch, 16, 64 * GIB, resource_mode="manual")
    assert governor.recommend_workers(0) == 16


def test_auto_leaves_one_cpu_free(monkeypatch):
    governor = _governor(monkeypatch, 4, 64 * GIB)
    assert governor.recommend_workers(0) == 3


def test_auto_caps_at_eight(monkeypatch):
    governor = _governor(monkeypatch, 32, 256 * GIB)
    assert governor.recommend_workers(0, RenderFootprint.for_canvas((512, 512))) == 8


def test_memory_left_after_cache_caps_workers(monkeypatch):
    governor = _governor(monkeypatch, 16, GIB)
    footprint = RenderFootprint.for_canvas((4096, 4096), cache_bytes=512 * MIB)
    # 0.8 GiB budget less the cache leaves room for two 128 MiB worker slots
    assert governor.recommend_workers(0, footprint) == 2


def test_cache_larger_than_budget_still_one_worker(monkeypatch):
    governor = _governor(monkeypatch, 16, GIB)
    footprint = RenderFootprint.for_canvas((1024, 1024), cache_bytes=2 * GIB)
    assert governor.recommend_workers(4, footprint) == 1


def test_max_memory_caps_budget(monkeypatch):
    governor = _governor(monkeypatch, 16, 64 * GIB, max_memory_gb=1.0)
    assert governor.memory_budget_bytes() == int(0.8 * GIB)
    footprint = RenderFootprint.for_canvas((4096, 4096), cache_bytes=512 * MIB)
    assert governor.recommend_workers(0, footprint) == 2


def test_request_below_caps_is_kept(monkeypatch):
    governor = _governor(monkeypatch, 16, 64 * GIB)
    assert governor.recommend_workers(2, RenderFootprint.for_canvas((64, 64))) == 2
