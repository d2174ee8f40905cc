"""Per-artifact metadata: trait attributes derived from option paths."""

import json
import re
from pathlib import Path, PurePath
from typing import Any

from pydantic import BaseModel


_FILENAME = re.compile(r"^(.*?)(?:#(\d+))?\..*$")
_PART_NOISE = re.compile(r"#\d+|\.\w+$")


class Attribute(BaseModel):
    """One (trait_type, value) pair of an artifact."""

    trait_type: str
    value: str
    weight: float = 1.0


def _relative_parts(option_path: str, base_path: str) -> tuple[str, ...]:
    path = PurePath(option_path)
    try:
        return path.relative_to(PurePath(base_path)).parts
    except ValueError:
        # not under the base path: fall back to "<layer>/<file>"
        return path.parts[-2:]


def describe_option(option_path: str, base_path: str) -> Attribute:
    """Turn an option path into its metadata attribute.

    The first folder under the base path is the trait type, the file name is
    the value; weight markers and the extension are stripped from both.

    Example:
        ("./images/Hair/Black#700/Style2#25.png", "./images/")
        -> Attribute(trait_type="Hair", value="Style2", weight=25.0)
    """
    parts = [_PART_NOISE.sub("", part) for part in _relative_parts(option_path, base_path)]

    match = _FILENAME.match(PurePath(option_path).name)
    weight = float(match.group(2)) if match and match.group(2) else 1.0

    return Attribute(trait_type=parts[0], value=parts[-1], weight=weight)


def build_metadata(
    base: dict[str, Any],
    attributes: list[Attribute],
    index: int,
    image_url: str | None = None,
) -> dict[str, Any]:
    """Collection-level metadata plus this artifact's attributes."""
    payload = dict(base)
    payload["edition"] = index
    if image_url:
        payload["image"] = f"{image_url.rstrip('/')}/{index}.png"
    payload["attributes"] = [
        {"trait_type": attr.trait_type, "value": attr.value} for attr in attributes
    ]
    return payload


def write_metadata(payload: dict[str, Any], path: Path | str) -> None:
    """Write metadata as pretty-printed JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, default=str)
