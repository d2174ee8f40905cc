"""Filesystem discovery of layer folders and trait option files."""

import logging
import os
from pathlib import Path

from ..core.errors import DirectoryUnreadableError
from ..core.models import LayerSet


logger = logging.getLogger(__name__)


def list_entries(path: str) -> list[str]:
    """Immediate entries (files and folders) of a directory, as paths.

    Entries are joined onto `path` as given, so they share its prefix.

    Raises:
        DirectoryUnreadableError: If the directory cannot be listed.
    """
    try:
        names = sorted(os.listdir(path))
    except OSError as e:
        raise DirectoryUnreadableError(path) from e
    return [os.path.join(path, name) for name in names]


def list_layer_folders(base_path: str) -> list[str]:
    """Sub-directories of the base path (one per layer)."""
    return [entry for entry in list_entries(base_path) if os.path.isdir(entry)]


def find_image_files(directory: str | Path, extension: str = "png") -> list[str]:
    """All files under `directory` with the given extension, recursively.

    Extension matching is case-insensitive. Unreadable sub-directories and
    non-matching files are skipped.
    """
    suffix = "." + extension.lstrip(".").lower()
    found: list[str] = []

    def _on_error(err: OSError) -> None:
        logger.debug("Skipping unreadable entry %s: %s", err.filename, err)

    for root, dirs, files in os.walk(directory, onerror=_on_error):
        dirs.sort()
        for name in sorted(files):
            if name.lower().endswith(suffix):
                found.append(os.path.join(root, name))
    return found


def load_layers(layer_paths: list[str], extension: str = "png") -> LayerSet:
    """Discover the trait options of each layer folder, keeping layer order."""
    layers = [find_image_files(path, extension) for path in layer_paths]
    for path, layer in zip(layer_paths, layers):
        logger.info("Layer %s: %d options", path, len(layer))
    return layers


def remove_named_files(root: str | Path, name: str = ".DS_Store") -> list[str]:
    """Delete every file called `name` under root; returns what was removed."""
    removed: list[str] = []
    for dirpath, _dirs, files in os.walk(root):
        if name in files:
            target = os.path.join(dirpath, name)
            os.remove(target)
            logger.info("Removed file: %s", target)
            removed.append(target)
    return removed


def clear_output(output_path: str | Path) -> int:
    """Create the output directory and delete any files already in it.

    Returns the number of files removed.
    """
    output = Path(output_path)
    output.mkdir(parents=True, exist_ok=True)
    removed = 0
    for path in sorted(output.rglob("*")):
        if path.is_file():
            path.unlink()
            removed += 1
    return removed
