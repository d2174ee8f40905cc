"""Collection config models and file I/O for traitgen.

A CollectionSpec is everything a run needs to know about the collection:
where the layer folders live, in which order they stack, how many unique
artifacts to produce, and which forced-combination quotas to honor.

Config files use camelCase keys, e.g.:

    {
      "image": {"width": 1024, "height": 1024},
      "totalSupply": 500,
      "basePath": "./images/",
      "outputPath": "output",
      "layerFolders": ["Background", "Face", "Hair"],
      "skippedTraits": ["None"],
      "forcedCombinations": [
        {"combo": [{"layer": "Face", "value": "BasilSynth_V1"}], "percentage": 10}
      ],
      "metadata": {"name": "My Collection"}
    }
"""

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


WILDCARD_VALUE = "*"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Forced combinations
# =============================================================================


class SubLayerRef(_CamelModel):
    """Reference to a grouping folder nested inside a layer folder."""

    main_layer: str = Field(description="Layer folder name, e.g. 'Hair'")
    sub_layer: str = Field(description="Prefix of the sub-folder, e.g. 'Black#700'")


LayerRef = str | SubLayerRef


class ForcedCombo(_CamelModel):
    """One (layer, value) constraint of a forced combination."""

    layer: LayerRef
    value: str = Field(
        description="Required file-name prefix, or '*' for any file in a sub-layer"
    )

    @property
    def is_wildcard(self) -> bool:
        return self.value == WILDCARD_VALUE

    def references(self, layer_name: str) -> bool:
        """Whether this constraint applies to options of the given layer."""
        if isinstance(self.layer, SubLayerRef):
            return layer_name in (self.layer.main_layer, self.layer.sub_layer)
        return self.layer == layer_name


class ForcedCombination(_CamelModel):
    """A rule reserving a share of the output for specific trait values."""

    combo: list[ForcedCombo] = Field(min_length=1)
    percentage: int = Field(ge=0, le=100)

    def quota(self, total_supply: int) -> int:
        """Number of artifacts this rule reserves out of total_supply."""
        return (total_supply * self.percentage) // 100


# =============================================================================
# Collection spec
# =============================================================================


class ImageSize(_CamelModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


class CollectionSpec(_CamelModel):
    """Complete configuration for generating one collection."""

    metadata: dict[str, Any] = Field(default_factory=dict)
    image: ImageSize
    total_supply: int = Field(ge=0)
    base_path: str
    output_path: str
    image_url: str | None = None
    layer_folders: list[str] = Field(min_length=1)
    skipped_traits: list[str] | None = None
    forced_combinations: list[ForcedCombination] = Field(default_factory=list)

    @property
    def total_percentage(self) -> int:
        return sum(fc.percentage for fc in self.forced_combinations)

    def layer_paths(self) -> list[str]:
        """Configured layer folders joined onto the base path, in stacking order."""
        return [os.path.join(self.base_path, folder) for folder in self.layer_folders]

    def to_yaml(self, path: Path | str) -> None:
        """Save spec to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)

        with open(path, "w") as f:
            yaml.dump(
                data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

    @classmethod
    def from_file(cls, path: Path | str) -> "CollectionSpec":
        """Load spec from a JSON or YAML file (chosen by suffix)."""
        path = Path(path)

        with open(path) as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        return cls.model_validate(data)

    def summary(self) -> str:
        """Get a text summary of the spec."""
        lines = [
            f"Collection: {self.metadata.get('name', '(unnamed)')}",
            f"Image: {self.image.width}x{self.image.height}",
            f"Total supply: {self.total_supply}",
            f"Layers ({len(self.layer_folders)}): {', '.join(self.layer_folders)}",
        ]
        if self.forced_combinations:
            lines.append(
                f"Forced combinations: {len(self.forced_combinations)} "
                f"({self.total_percentage}% reserved)"
            )
        return "\n".join(lines)
