"""Runtime configuration for traitgen.

Collection-level settings (layers, supply, forced combinations) live in the
per-collection config file (see traitgen.core.models.CollectionSpec). This
module holds machine-level tuning that applies to every run:

- generation: draw ceilings for the combination generator
- render: worker pool and compositing options

Config resolution order (highest priority first):
1. Programmatic (TraitgenConfig constructed in code, set via configure())
2. Environment variables (TRAITGEN_WORKERS, TRAITGEN_TASK_TIMEOUT, etc.)
3. Config file (~/.config/traitgen/config.json, managed by `traitgen config`)
4. Hardcoded defaults
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "traitgen"
CONFIG_FILE = CONFIG_DIR / "config.json"


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class GenerationSettings:
    """Draw ceiling for the combination generator.

    A quota of N combinations may take at most
    max(min_attempts, N * max_attempts_per_item) draws before failing with
    GenerationStalledError.
    """

    max_attempts_per_item: int = 1000
    min_attempts: int = 100_000


@dataclass
class RenderSettings:
    """Compositing worker pool configuration."""

    workers: int = 0  # 0 = auto from CPU/memory
    task_timeout_seconds: float | None = None  # None = wait for every task
    image_extension: str = "png"
    max_memory_gb: float | None = None  # None = all physical memory
    resource_mode: str = "auto"


@dataclass
class TraitgenConfig:
    """Top-level traitgen configuration.

    Examples:
        # Package use: no files needed
        config = TraitgenConfig(render=RenderSettings(workers=4))

        # CLI use: loads from ~/.config/traitgen/config.json
        config = TraitgenConfig.load()
    """

    generation: GenerationSettings = field(default_factory=GenerationSettings)
    render: RenderSettings = field(default_factory=RenderSettings)

    @classmethod
    def load(cls) -> "TraitgenConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        # Layer 1: Load from config file if it exists
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError, TypeError, ValueError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        # Layer 2: Env var overrides
        _apply_int_env(
            config.generation, "max_attempts_per_item", "TRAITGEN_MAX_ATTEMPTS_PER_ITEM"
        )
        _apply_int_env(config.generation, "min_attempts", "TRAITGEN_MIN_ATTEMPTS")
        _apply_int_env(config.render, "workers", "TRAITGEN_WORKERS")
        if val := os.environ.get("TRAITGEN_TASK_TIMEOUT"):
            try:
                config.render.task_timeout_seconds = float(val)
            except ValueError:
                logger.warning("Invalid TRAITGEN_TASK_TIMEOUT=%r, ignoring", val)
        if val := os.environ.get("TRAITGEN_IMAGE_EXTENSION"):
            config.render.image_extension = val.lstrip(".")

        return config

    def save(self) -> None:
        """Save config to ~/.config/traitgen/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "generation": asdict(self.generation),
            "render": asdict(self.render),
        }


# =============================================================================
# Config dict application
# =============================================================================


def _apply_int_env(section: Any, attr: str, env_var: str) -> None:
    if val := os.environ.get(env_var):
        try:
            setattr(section, attr, int(val))
        except ValueError:
            logger.warning("Invalid %s=%r, ignoring", env_var, val)


def _apply_dict(config: TraitgenConfig, data: dict) -> None:
    """Apply a dict of values onto a TraitgenConfig."""
    if "generation" in data and isinstance(data["generation"], dict):
        for k, v in data["generation"].items():
            if hasattr(config.generation, k):
                setattr(config.generation, k, int(v))
    if "render" in data and isinstance(data["render"], dict):
        for k, v in data["render"].items():
            if hasattr(config.render, k):
                setattr(config.render, k, v)


# =============================================================================
# Global config singleton
# =============================================================================

_config: TraitgenConfig | None = None


def get_config() -> TraitgenConfig:
    """Get the global TraitgenConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = TraitgenConfig.load()
    return _config


def configure(config: TraitgenConfig) -> None:
    """Set the global TraitgenConfig programmatically.

    Use this when traitgen is used as a package:
        from traitgen.config import configure, TraitgenConfig, RenderSettings
        configure(TraitgenConfig(render=RenderSettings(workers=2)))
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
