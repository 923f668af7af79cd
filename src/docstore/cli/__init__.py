"""Command-line interface."""

from docstore.cli.app import app

__all__ = ["app"]
