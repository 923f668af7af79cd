"""Main CLI application."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any
from uuid import UUID

import typer

from docstore.cli.console import console, create_table, dim, error, success, to_json
from docstore.collection import Collection
from docstore.config import ConfigError, load_config
from docstore.database import Database
from docstore.errors import DocstoreError
from docstore.logging import configure_logging
from docstore.types import RawDocument

app = typer.Typer(
    name="docstore",
    help="docstore - inspect and edit a remote document store",
    no_args_is_help=True,
)


@dataclass
class CliState:
    config_path: Path | None = None
    address: str | None = None


def _create_database(state: CliState) -> Database:
    config = load_config(state.config_path)
    configure_logging(config.logging.level, use_rich=True)
    return Database.connect(state.address, config=config)


def _collection(ctx: typer.Context, name: str) -> Collection[RawDocument]:
    state: CliState = ctx.obj
    try:
        database = _create_database(state)
    except (ConfigError, FileNotFoundError) as e:
        error(str(e))
        raise typer.Exit(1) from None
    return database.collection(name, RawDocument)


def _run(coro) -> Any:
    """Run an async store operation, reporting library errors."""
    try:
        return asyncio.run(coro)
    except DocstoreError as e:
        error(str(e))
        raise typer.Exit(1) from None


def _parse_json(text: str, what: str) -> dict[str, Any]:
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        error(f"Invalid {what} JSON: {e}")
        raise typer.Exit(1) from None
    if not isinstance(value, dict):
        error(f"{what.capitalize()} must be a JSON object")
        raise typer.Exit(1)
    return value


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to configuration file"),
    ] = None,
    address: Annotated[
        str | None,
        typer.Option(
            "--address",
            "-a",
            help="Store address (tcp://host:port or unix:///path)",
        ),
    ] = None,
) -> None:
    """Inspect and edit collections in a document store."""
    ctx.obj = CliState(config_path=config, address=address)


@app.command()
def find(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name")],
    filter: Annotated[
        str | None,
        typer.Option("--filter", "-f", help="Filter document as JSON"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Maximum number of documents"),
    ] = None,
) -> None:
    """List documents in a collection."""
    query = _parse_json(filter, "filter") if filter is not None else None
    coll = _collection(ctx, collection)

    if query is None:
        docs = _run(coll.find_all(limit))
    else:
        docs = _run(coll.find(query, limit))

    if not docs:
        dim("No documents found.")
        return

    table = create_table(
        collection,
        [("ID", {"style": "cyan", "no_wrap": True}), ("Document", {})],
    )
    for doc in docs:
        table.add_row(str(doc.id), to_json(doc))
    console.print(table)
    dim(f"{len(docs)} document(s)")


@app.command()
def get(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name")],
    id: Annotated[str, typer.Argument(help="Document ID")],
) -> None:
    """Show one document by ID."""
    try:
        doc_id = UUID(id)
    except ValueError:
        error(f"Invalid document ID: {id}")
        raise typer.Exit(1) from None

    coll = _collection(ctx, collection)
    doc = _run(coll.get(doc_id))
    if doc is None:
        error(f"Document {doc_id} not found")
        raise typer.Exit(1)
    console.print_json(to_json(doc))


@app.command()
def insert(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name")],
    document: Annotated[str, typer.Argument(help="Document as JSON")],
) -> None:
    """Insert a document."""
    value = RawDocument.model_validate(_parse_json(document, "document"))
    coll = _collection(ctx, collection)
    doc = _run(coll.insert(value))
    success(f"Inserted {doc.id}")


@app.command()
def remove(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name")],
    filter: Annotated[str, typer.Argument(help="Filter document as JSON")],
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Maximum number of documents"),
    ] = None,
) -> None:
    """Remove documents matching a filter."""
    query = _parse_json(filter, "filter")
    coll = _collection(ctx, collection)
    count = _run(coll.remove(query, limit))
    success(f"Removed {count} document(s)")


@app.command()
def truncate(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip confirmation")
    ] = False,
) -> None:
    """Remove every document in a collection."""
    if not yes:
        typer.confirm(f"Remove every document in {collection!r}?", abort=True)
    coll = _collection(ctx, collection)
    count = _run(coll.truncate())
    success(f"Removed {count} document(s)")


if __name__ == "__main__":
    app()
