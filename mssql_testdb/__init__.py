from mssql_testdb.connection_string import parse_connection_string, with_database
from mssql_testdb.exceptions import InvalidArgument, InvalidConnectionString
from mssql_testdb.fixture import SqlServerFixture
from mssql_testdb.helpers import create_db_connection_string, create_db_connection_string_for_test
from mssql_testdb.naming import MAX_DATABASE_NAME_LENGTH, unique_database_name
from mssql_testdb.sinks import ListSink, LoggingSink, Sink, StreamSink

__all__ = [
    "MAX_DATABASE_NAME_LENGTH",
    "InvalidArgument",
    "InvalidConnectionString",
    "ListSink",
    "LoggingSink",
    "Sink",
    "SqlServerFixture",
    "StreamSink",
    "create_db_connection_string",
    "create_db_connection_string_for_test",
    "parse_connection_string",
    "unique_database_name",
    "with_database",
]
