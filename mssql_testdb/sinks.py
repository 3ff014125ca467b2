"""Diagnostic sinks for the generated connection string."""

import logging
from typing import List, Optional, Protocol, TextIO, runtime_checkable


@runtime_checkable
class Sink(Protocol):
    def write(self, line: str) -> None: ...


class LoggingSink:
    """Send each line to a stdlib logger so pytest's log capture shows it."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger("mssql_testdb.output")
        self.level = level

    def write(self, line: str) -> None:
        self.logger.log(self.level, "%s", line)


class ListSink:
    def __init__(self):
        self.lines: List[str] = []

    def write(self, line: str) -> None:
        self.lines.append(line)


class StreamSink:
    """Write lines to a text stream, one per line."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def write(self, line: str) -> None:
        self.stream.write(f"{line}\n")
