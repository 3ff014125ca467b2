"""Per-test unique database connection strings.

Each call appends a fresh UUID to the requested name, so parallel test runs
against the same server never share a database and need no coordination.
"""

import logging
from typing import Any, Optional

from mssql_testdb.connection_string import with_database
from mssql_testdb.exceptions import InvalidArgument
from mssql_testdb.naming import unique_database_name
from mssql_testdb.sinks import Sink

logger = logging.getLogger("mssql_testdb.helpers")

OUTPUT_LABEL = "** Sql Server Connection String:"


def _base_connection_string(sql_server: Any) -> str:
    if sql_server is None:
        raise InvalidArgument("sql_server is required")
    if isinstance(sql_server, str):
        return sql_server
    connection_string = getattr(sql_server, "connection_string", None)
    if connection_string is None:
        raise InvalidArgument(
            "sql_server has no connection_string",
            details={"type": type(sql_server).__name__},
        )
    return connection_string


def create_db_connection_string(
    sql_server: Any,
    database_name: str,
    output: Optional[Sink] = None,
) -> str:
    """Create a connection string for a unique database based on ``database_name``.

    The database name is always suffixed with a 32-character hex UUID. If the
    result is longer than 100 characters, the name part is truncated and the
    UUID kept whole (see ``naming.unique_database_name``).

    Args:
        sql_server: a ``SqlServerFixture`` (anything with ``connection_string``)
            or a base connection string.
        database_name: logical name, usually the test name.
        output: optional sink; when given, the full connection string
            (credentials included) is written to it so the database can be
            inspected while debugging.

    Raises:
        InvalidArgument: ``database_name`` is missing or not a string.
        InvalidConnectionString: the base connection string cannot be parsed.
    """
    if database_name is None:
        raise InvalidArgument("database_name is required")
    if not isinstance(database_name, str):
        raise InvalidArgument(
            "database_name must be a string",
            details={"type": type(database_name).__name__},
        )

    unique_name = unique_database_name(database_name)
    connection_string = with_database(_base_connection_string(sql_server), unique_name)
    logger.debug("Created unique database name %s", unique_name)

    if output is not None:
        output.write(f"{OUTPUT_LABEL} {connection_string}")

    return connection_string


def current_test_name(request: Any) -> str:
    """Return the display name of the test that ``request`` belongs to."""
    node = getattr(request, "node", None)
    name = getattr(node, "name", None)
    if name is None:
        raise InvalidArgument("request does not carry a running test")
    return name


def create_db_connection_string_for_test(
    sql_server: Any,
    request: Any,
    output: Optional[Sink] = None,
) -> str:
    """Create a unique database connection string named after the current test.

    ``request`` is the pytest ``request`` fixture; its ``node.name``
    (e.g. ``test_insert[case-1]``) becomes the database name prefix.
    """
    return create_db_connection_string(sql_server, current_test_name(request), output)
