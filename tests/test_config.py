"""Tests for runtime configuration loading."""

import json

from traitgen.config import (
    GenerationSettings,
    RenderSettings,
    TraitgenConfig,
    configure,
    get_config,
    reset_config,
)


class TestTraitgenConfig:
    """Tests for TraitgenConfig layering."""

    def test_defaults(self):
        config = TraitgenConfig.load()
        assert config.generation.max_attempts_per_item == 1000
        assert config.generation.min_attempts == 100_000
        assert config.render.workers == 0
        assert config.render.task_timeout_seconds is None
        assert config.render.image_extension == "png"

    def test_file_values(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(
            json.dumps({"generation": {"min_attempts": 50}, "render": {"workers": 3}})
        )
        config = TraitgenConfig.load()
        assert config.generation.min_attempts == 50
        assert config.render.workers == 3

    def test_env_overrides_file(self, isolated_config, monkeypatch):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(json.dumps({"render": {"workers": 3}}))
        monkeypatch.setenv("TRAITGEN_WORKERS", "6")
        monkeypatch.setenv("TRAITGEN_TASK_TIMEOUT", "2.5")
        monkeypatch.setenv("TRAITGEN_IMAGE_EXTENSION", ".webp")
        monkeypatch.setenv("TRAITGEN_MAX_ATTEMPTS_PER_ITEM", "20")

        config = TraitgenConfig.load()
        assert config.render.workers == 6
        assert config.render.task_timeout_seconds == 2.5
        assert config.render.image_extension == "webp"
        assert config.generation.max_attempts_per_item == 20

    def test_invalid_env_is_ignored(self, monkeypatch):
        monkeypatch.setenv("TRAITGEN_WORKERS", "many")
        monkeypatch.setenv("TRAITGEN_TASK_TIMEOUT", "soon")
        config = TraitgenConfig.load()
        assert config.render.workers == 0
        assert config.render.task_timeout_seconds is None

    def test_corrupt_file_falls_back_to_defaults(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("{broken")
        assert TraitgenConfig.load().render.workers == 0

    def test_save_round_trip(self, isolated_config):
        config = TraitgenConfig(render=RenderSettings(workers=4))
        config.save()
        assert json.loads(isolated_config.read_text())["render"]["workers"] == 4
        assert TraitgenConfig.load().render.workers == 4


class TestGlobalConfig:
    def test_singleton(self):
        assert get_config() is get_config()

    def test_configure_and_reset(self):
        custom = TraitgenConfig(generation=GenerationSettings(min_attempts=5))
        configure(custom)
        assert get_config() is custom
        reset_config()
        assert get_config() is not custom
