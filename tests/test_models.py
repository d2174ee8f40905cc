"""Tests for collection config models and file I/O."""

import json

import pytest
import yaml
from pydantic import ValidationError

from traitgen.core.models import (
    CollectionSpec,
    ForcedCombination,
    ForcedCombo,
    GenerationResult,
    SubLayerRef,
)


class TestCollectionSpec:
    """Tests for CollectionSpec."""

    def test_camel_case_keys(self, collection_data):
        spec = CollectionSpec.model_validate(collection_data)
        assert spec.total_supply == 10
        assert spec.layer_folders == ["Background", "Face", "Hair"]
        assert spec.image.as_tuple() == (4, 4)
        assert spec.skipped_traits is None
        assert spec.forced_combinations == []

    def test_layer_paths_join_base(self):
        spec = CollectionSpec(
            image={"width": 1, "height": 1},
            total_supply=1,
            base_path="./images/",
            output_path="out",
            layer_folders=["Background", "Hair"],
        )
        assert spec.layer_paths() == ["./images/Background", "./images/Hair"]

    def test_total_percentage(self, collection_data):
        collection_data["forcedCombinations"] = [
            {"combo": [{"layer": "Face", "value": "Happy"}], "percentage": 10},
            {"combo": [{"layer": "Face", "value": "Sad"}], "percentage": 15},
        ]
        spec = CollectionSpec.model_validate(collection_data)
        assert spec.total_percentage == 25

    def test_requires_layers(self, collection_data):
        collection_data["layerFolders"] = []
        with pytest.raises(ValidationError):
            CollectionSpec.model_validate(collection_data)

    def test_rejects_negative_supply(self, collection_data):
        collection_data["totalSupply"] = -1
        with pytest.raises(ValidationError):
            CollectionSpec.model_validate(collection_data)

    def test_from_json_file(self, config_file):
        spec = CollectionSpec.from_file(config_file)
        assert spec.metadata["name"] == "Test Collection"

    def test_yaml_round_trip(self, collection_data, tmp_path):
        collection_data["imageUrl"] = "https://example.com/art"
        spec = CollectionSpec.model_validate(collection_data)
        path = tmp_path / "collection.yaml"
        spec.to_yaml(path)

        raw = yaml.safe_load(path.read_text())
        assert raw["totalSupply"] == 10
        assert "skippedTraits" not in raw
        assert CollectionSpec.from_file(path) == spec

    def test_summary(self, collection_spec):
        text = collection_spec.summary()
        assert "Test Collection" in text
        assert "Total supply: 10" in text
        assert "Background, Face, Hair" in text

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            CollectionSpec.from_file(path)


class TestForcedCombination:
    def test_quota_floors(self):
        rule = ForcedCombination(combo=[ForcedCombo(layer="Face", value="X")], percentage=33)
        assert rule.quota(10) == 3
        assert rule.quota(100) == 33
        assert rule.quota(2) == 0

    def test_requires_combo(self):
        with pytest.raises(ValidationError):
            ForcedCombination(combo=[], percentage=10)

    def test_percentage_bounds(self):
        with pytest.raises(ValidationError):
            ForcedCombination(combo=[ForcedCombo(layer="Face", value="X")], percentage=101)

    def test_references(self):
        simple = ForcedCombo(layer="Face", value="X")
        nested = ForcedCombo(layer=SubLayerRef(main_layer="Hair", sub_layer="Black"), value="*")
        assert simple.references("Face")
        assert not simple.references("Hair")
        assert nested.references("Hair")
        assert nested.references("Black")
        assert not nested.references("Face")
        assert nested.is_wildcard and not simple.is_wildcard


class TestGenerationResult:
    def test_ordered_follows_insertion(self):
        result = GenerationResult(combinations={5: ("b",), 2: ("a",)})
        assert result.ordered() == [("b",), ("a",)]
