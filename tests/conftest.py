"""Shared test fixtures for mssql-testdb."""

import pytest

from mssql_testdb.sinks import ListSink

# Points at a server, not a database.
BASE_CONNECTION_STRING = "Server=db;User Id=sa;Password=pw;"


@pytest.fixture()
def base_connection_string():
    return BASE_CONNECTION_STRING


@pytest.fixture()
def sink():
    """Sink that keeps every line written to it."""
    return ListSink()
