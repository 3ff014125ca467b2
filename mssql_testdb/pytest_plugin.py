"""pytest fixtures giving each test its own database on a shared SQL Server.

Set ``MSSQL_TESTDB_CONNECTION_STRING`` (environment or ``.env``) to the
server's connection string, then request ``db_connection_string``:

    def test_insert(db_connection_string):
        engine = create_engine(db_connection_string)
        ...
"""

import logging

import pytest

from mssql_testdb.config import configure_logging, settings
from mssql_testdb.exceptions import InvalidArgument
from mssql_testdb.fixture import SqlServerFixture
from mssql_testdb.helpers import create_db_connection_string_for_test
from mssql_testdb.sinks import LoggingSink


@pytest.fixture(scope="session")
def sql_server():
    """Shared server handle; skips when no server is configured.

    The package logger level is set for the session and restored afterwards.
    """
    package_logger = logging.getLogger("mssql_testdb")
    previous_level = package_logger.level
    try:
        server = SqlServerFixture.from_settings(settings)
    except InvalidArgument as e:
        pytest.skip(f"No SQL Server configured: {e.message}")

    configure_logging(settings.MSSQL_TESTDB_LOG_LEVEL)
    try:
        yield server
    finally:
        package_logger.setLevel(previous_level)


@pytest.fixture()
def db_connection_string(sql_server, request):
    """Connection string for a database unique to the requesting test."""
    return create_db_connection_string_for_test(sql_server, request, LoggingSink())
