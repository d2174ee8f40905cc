"""Tests for per-artifact metadata."""

import json

from traitgen.assets.metadata import (
    Attribute,
    build_metadata,
    describe_option,
    write_metadata,
)


class TestDescribeOption:
    def test_sub_group_option(self):
        attr = describe_option("./images/Hair/Black#700/Style2#25.png", "./images/")
        assert attr == Attribute(trait_type="Hair", value="Style2", weight=25.0)

    def test_plain_option(self):
        attr = describe_option("./images/Face/Happy.png", "./images/")
        assert attr.trait_type == "Face"
        assert attr.value == "Happy"
        assert attr.weight == 1.0

    def test_layer_suffix_stripped(self):
        attr = describe_option("/art/layers/Hair#2/Long#10.png", "/art/layers")
        assert attr.trait_type == "Hair"
        assert attr.value == "Long"

    def test_outside_base_path(self):
        attr = describe_option("/elsewhere/Face/Sad#75.png", "./images/")
        assert (attr.trait_type, attr.value, attr.weight) == ("Face", "Sad", 75.0)


class TestBuildMetadata:
    attributes = [
        Attribute(trait_type="Background", value="Blue"),
        Attribute(trait_type="Face", value="Happy"),
    ]

    def test_payload(self):
        base = {"name": "Test", "description": "d"}
        payload = build_metadata(base, self.attributes, 7)
        assert payload["name"] == "Test"
        assert payload["edition"] == 7
        assert "image" not in payload
        assert payload["attributes"] == [
            {"trait_type": "Background", "value": "Blue"},
            {"trait_type": "Face", "value": "Happy"},
        ]
        assert "edition" not in base

    def test_image_url(self):
        payload = build_metadata({}, self.attributes, 3, "https://example.com/art/")
        assert payload["image"] == "https://example.com/art/3.png"

    def test_write(self, tmp_path):
        path = tmp_path / "meta" / "1.json"
        write_metadata({"edition": 1}, path)
        assert json.loads(path.read_text()) == {"edition": 1}
