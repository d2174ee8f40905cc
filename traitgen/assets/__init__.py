"""Asset I/O around the engine: discovery, compositing, metadata, rendering."""

from .discovery import (
    list_entries,
    list_layer_folders,
    find_image_files,
    load_layers,
    remove_named_files,
    clear_output,
)
from .compositor import ImageCache, composite, save_image
from .metadata import Attribute, describe_option, build_metadata, write_metadata
from .render import ArtifactFailure, RenderReport, render_artifact, render_collection

__all__ = [
    "list_entries",
    "list_layer_folders",
    "find_image_files",
    "load_layers",
    "remove_named_files",
    "clear_output",
    "ImageCache",
    "composite",
    "save_image",
    "Attribute",
    "describe_option",
    "build_metadata",
    "write_metadata",
    "ArtifactFailure",
    "RenderReport",
    "render_artifact",
    "render_collection",
]
