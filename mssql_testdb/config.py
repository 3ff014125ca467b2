import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Settings:
    MSSQL_TESTDB_CONNECTION_STRING: str = os.getenv("MSSQL_TESTDB_CONNECTION_STRING", "")
    MSSQL_TESTDB_IS_REUSED: bool = os.getenv("MSSQL_TESTDB_IS_REUSED", "false").lower() == "true"
    MSSQL_TESTDB_LOG_LEVEL: str = os.getenv("MSSQL_TESTDB_LOG_LEVEL", "INFO").upper()


settings = Settings()


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Apply the configured level to the package logger and return it.

    Unknown level names fall back to INFO.
    """
    logger = logging.getLogger("mssql_testdb")
    name = (level or settings.MSSQL_TESTDB_LOG_LEVEL).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        logger.warning("Unknown log level: %s", name)
        resolved = logging.INFO
    logger.setLevel(resolved)
    return logger
