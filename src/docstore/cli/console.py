"""Shared console utilities for CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from docstore.collection import Document

# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{msg}[/red]")


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{msg}[/green]")


def dim(msg: str) -> None:
    """Print a dimmed message."""
    console.print(f"[dim]{msg}[/dim]")


def to_json(document: Document[Any]) -> str:
    """Render a document payload as compact JSON."""
    return json.dumps(document.document.model_dump(), default=str)


def create_table(title: str, columns: list[tuple[str, dict]]) -> Table:
    """Create a Rich table with the given columns.

    Args:
        title: Table title.
        columns: List of (header, style_kwargs) tuples.
    """
    table = Table(title=title)
    for header, kwargs in columns:
        table.add_column(header, **kwargs)
    return table
