"""Unit tests for the server fixture and settings."""

import importlib
import logging

import pytest

from mssql_testdb import config
from mssql_testdb.config import Settings, configure_logging
from mssql_testdb.exceptions import InvalidArgument, InvalidConnectionString
from mssql_testdb.fixture import SqlServerFixture


def _settings(connection_string="", is_reused=False):
    settings = Settings()
    settings.MSSQL_TESTDB_CONNECTION_STRING = connection_string
    settings.MSSQL_TESTDB_IS_REUSED = is_reused
    return settings


class TestSqlServerFixture:
    def test_holds_connection_string(self, base_connection_string):
        fixture = SqlServerFixture(base_connection_string)
        assert fixture.connection_string == base_connection_string
        assert fixture.is_reused is False

    def test_rejects_malformed_connection_string(self):
        with pytest.raises(InvalidConnectionString):
            SqlServerFixture("not a connection string")

    def test_is_read_only(self, base_connection_string):
        fixture = SqlServerFixture(base_connection_string)
        with pytest.raises(AttributeError):
            fixture.connection_string = "Server=other"

    def test_repr_hides_credentials(self, base_connection_string):
        assert "pw" not in repr(SqlServerFixture(base_connection_string))

    def test_from_settings(self, base_connection_string):
        fixture = SqlServerFixture.from_settings(_settings(base_connection_string, is_reused=True))
        assert fixture.connection_string == base_connection_string
        assert fixture.is_reused is True

    def test_from_settings_requires_connection_string(self):
        with pytest.raises(InvalidArgument) as exc_info:
            SqlServerFixture.from_settings(_settings())
        assert exc_info.value.to_dict() == {
            "message": "MSSQL_TESTDB_CONNECTION_STRING is not set",
            "details": {"setting": "MSSQL_TESTDB_CONNECTION_STRING"},
        }


class TestSettings:
    def test_reads_environment(self, monkeypatch, base_connection_string):
        monkeypatch.setenv("MSSQL_TESTDB_CONNECTION_STRING", base_connection_string)
        monkeypatch.setenv("MSSQL_TESTDB_IS_REUSED", "True")
        monkeypatch.setenv("MSSQL_TESTDB_LOG_LEVEL", "debug")
        try:
            reloaded = importlib.reload(config)
            assert reloaded.settings.MSSQL_TESTDB_CONNECTION_STRING == base_connection_string
            assert reloaded.settings.MSSQL_TESTDB_IS_REUSED is True
            assert reloaded.settings.MSSQL_TESTDB_LOG_LEVEL == "DEBUG"
        finally:
            monkeypatch.undo()
            importlib.reload(config)

    def test_defaults(self, monkeypatch):
        for name in ("MSSQL_TESTDB_CONNECTION_STRING", "MSSQL_TESTDB_IS_REUSED", "MSSQL_TESTDB_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        try:
            reloaded = importlib.reload(config)
            assert reloaded.settings.MSSQL_TESTDB_IS_REUSED is False
            assert reloaded.settings.MSSQL_TESTDB_LOG_LEVEL == "INFO"
        finally:
            monkeypatch.undo()
            importlib.reload(config)


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_level(self):
        logger = logging.getLogger("mssql_testdb")
        level = logger.level
        yield
        logger.setLevel(level)

    def test_sets_package_level(self):
        assert configure_logging("debug").level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        assert configure_logging("LOUD").level == logging.INFO
