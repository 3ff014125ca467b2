"""Handle to a running SQL Server instance shared by a test session."""

import logging

from mssql_testdb.config import Settings
from mssql_testdb.connection_string import parse_connection_string
from mssql_testdb.exceptions import InvalidArgument

logger = logging.getLogger("mssql_testdb.fixture")


class SqlServerFixture:
    """Connection details for a server that tests create databases on.

    ``connection_string`` should point at the server rather than a specific
    database. ``is_reused`` records whether the server outlives the test run,
    which is when the logged connection strings are useful for inspecting
    data afterwards.
    """

    __slots__ = ("_connection_string", "_is_reused")

    def __init__(self, connection_string: str, is_reused: bool = False):
        # Fail at session start rather than in every test.
        parse_connection_string(connection_string)
        self._connection_string = connection_string
        self._is_reused = is_reused

    @property
    def connection_string(self) -> str:
        return self._connection_string

    @property
    def is_reused(self) -> bool:
        return self._is_reused

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlServerFixture":
        if not settings.MSSQL_TESTDB_CONNECTION_STRING:
            raise InvalidArgument(
                "MSSQL_TESTDB_CONNECTION_STRING is not set",
                details={"setting": "MSSQL_TESTDB_CONNECTION_STRING"},
            )
        logger.debug("Using SQL Server fixture (is_reused=%s)", settings.MSSQL_TESTDB_IS_REUSED)
        return cls(settings.MSSQL_TESTDB_CONNECTION_STRING, is_reused=settings.MSSQL_TESTDB_IS_REUSED)

    def __repr__(self) -> str:
        return f"SqlServerFixture(is_reused={self._is_reused})"
