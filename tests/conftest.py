"""Shared test fixtures and factories."""

from __future__ import annotations

import pytest

from docstore.collection import Collection
from docstore.connection import Connection
from tests.fakes import FakeStore, Greeting, Task


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store() -> FakeStore:
    """In-memory store backing the connection."""
    return FakeStore()


@pytest.fixture
def connection(store: FakeStore) -> Connection:
    return Connection(store)


@pytest.fixture
def greetings(connection: Connection) -> Collection[Greeting]:
    return connection.collection("test", Greeting)


@pytest.fixture
def tasks(connection: Connection) -> Collection[Task]:
    return connection.collection("tasks", Task)


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
