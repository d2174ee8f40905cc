"""Command-line interface for traitgen."""

from .app import app

__all__ = ["app"]
