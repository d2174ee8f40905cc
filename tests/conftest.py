"""Shared fixtures: a small on-disk layer tree and collection configs."""

import json
from pathlib import Path

import pytest
from PIL import Image

from traitgen.core.models import CollectionSpec


# layer folder -> (relative option path, RGBA fill)
LAYER_TREE = {
    "Background": [
        ("Blue#50.png", (0, 0, 255, 255)),
        ("Red#30.png", (255, 0, 0, 255)),
        ("Green#20.png", (0, 255, 0, 255)),
    ],
    "Face": [
        ("Happy#25.png", (255, 255, 0, 128)),
        ("Sad#75.png", (0, 255, 255, 128)),
    ],
    "Hair": [
        ("Black#700/Style1#25.png", (0, 0, 0, 200)),
        ("Black#700/Style2#25.png", (20, 20, 20, 200)),
        ("Blond#300/Style1#50.png", (250, 240, 190, 200)),
    ],
}

IMAGE_SIZE = (4, 4)


def make_png(path: Path, color: tuple[int, int, int, int], size=IMAGE_SIZE) -> Path:
    """Write a solid-color RGBA PNG."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path)
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the runtime config file at a temp dir and clear env overrides."""
    import traitgen.config as config_module
    import traitgen.cli.commands.config_cmd as config_cmd

    config_dir = tmp_path / ".traitgen-config"
    config_file = config_dir / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.setattr(config_cmd, "CONFIG_FILE", config_file)
    for var in (
        "TRAITGEN_MAX_ATTEMPTS_PER_ITEM",
        "TRAITGEN_MIN_ATTEMPTS",
        "TRAITGEN_WORKERS",
        "TRAITGEN_TASK_TIMEOUT",
        "TRAITGEN_IMAGE_EXTENSION",
    ):
        monkeypatch.delenv(var, raising=False)

    config_module.reset_config()
    yield config_file
    config_module.reset_config()


@pytest.fixture
def layer_tree(tmp_path) -> Path:
    """Build <tmp>/images/<Layer>/... with solid-color PNGs.

    Three backgrounds, two faces and three hair styles (two of them in the
    Black#700 sub-group): 18 possible combinations.
    """
    base = tmp_path / "images"
    for layer, options in LAYER_TREE.items():
        for relative, color in options:
            make_png(base / layer / relative, color)
    return base


@pytest.fixture
def collection_data(layer_tree, tmp_path) -> dict:
    """camelCase collection config for the layer tree."""
    return {
        "metadata": {"name": "Test Collection", "description": "fixture"},
        "image": {"width": IMAGE_SIZE[0], "height": IMAGE_SIZE[1]},
        "totalSupply": 10,
        "basePath": f"{layer_tree}/",
        "outputPath": str(tmp_path / "output"),
        "layerFolders": ["Background", "Face", "Hair"],
    }


@pytest.fixture
def collection_spec(collection_data) -> CollectionSpec:
    return CollectionSpec.model_validate(collection_data)


@pytest.fixture
def config_file(collection_data, tmp_path) -> Path:
    """The collection config written as JSON."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(collection_data, indent=2))
    return path


@pytest.fixture
def string_layers() -> list[list[str]]:
    """A 3x2x3 LayerSet of plain option paths (no files behind them)."""
    return [
        [
            "./images/Background/Blue#50.png",
            "./images/Background/Red#30.png",
            "./images/Background/Green#20.png",
        ],
        [
            "./images/Face/Happy#25.png",
            "./images/Face/Sad#75.png",
        ],
        [
            "./images/Hair/Black#700/Style1#25.png",
            "./images/Hair/Black#700/Style2#25.png",
            "./images/Hair/Blond#300/Style1#50.png",
        ],
    ]
