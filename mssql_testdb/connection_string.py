"""Connection string parsing and target-database rewriting.

Two grammars are understood:

  - ``key=value;`` strings, either ADO.NET
    (``Server=localhost,1433;User Id=sa;Password=pw;TrustServerCertificate=True``)
    or ODBC (``Driver={ODBC Driver 18 for SQL Server};Server=localhost;Uid=sa;Pwd=pw``)
  - SQLAlchemy URLs, e.g. ``mssql+pyodbc://sa:pw@localhost:1433/master?driver=...``,
    including ``mssql+pyodbc:///?odbc_connect=<key=value string>``

Only the target-database attribute is ever changed; every other attribute is
written back exactly as it was read.
"""

import logging
import re
from typing import List, Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from mssql_testdb.exceptions import InvalidConnectionString

logger = logging.getLogger("mssql_testdb.connection_string")

URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")

# A Driver, DSN or FILEDSN key marks an ODBC string.
ODBC_MARKER = re.compile(r"(?:^|;)\s*(?:driver|dsn|filedsn)\s*=", re.IGNORECASE)

# Normalised keys that select the catalog on SQL Server.
DATABASE_KEYS = ("initial catalog", "database")


def _normalise_key(key: str) -> str:
    return " ".join(key.split()).lower()


class _Pair:
    __slots__ = ("key", "value", "raw")

    def __init__(self, key: str, value: str, raw: str):
        self.key = key
        self.value = value
        self.raw = raw

    @property
    def normalised_key(self) -> str:
        return _normalise_key(self.key)


def _read_quoted(text: str, start: int, quote: str) -> tuple:
    """Read a quoted value starting at ``text[start] == quote``.

    A doubled quote inside the value is an escaped quote. Returns the decoded
    value and the index just past the closing quote.
    """
    i = start + 1
    chars = []
    while i < len(text):
        ch = text[i]
        if ch == quote:
            if i + 1 < len(text) and text[i + 1] == quote:
                chars.append(quote)
                i += 2
                continue
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    raise InvalidConnectionString(
        "Unterminated quoted value in connection string",
        details={"position": start},
    )


def _read_braced(text: str, start: int) -> tuple:
    """Read an ODBC ``{...}`` value; ``}}`` escapes a closing brace."""
    i = start + 1
    chars = []
    while i < len(text):
        ch = text[i]
        if ch == "}":
            if i + 1 < len(text) and text[i + 1] == "}":
                chars.append("}")
                i += 2
                continue
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    raise InvalidConnectionString(
        "Unterminated '{' in connection string",
        details={"position": start},
    )


def _find_key_end(text: str, pos: int, odbc: bool) -> int:
    """Index of the ``=`` ending the key that starts at ``pos``, or -1.

    ADO.NET escapes ``=`` inside a key as ``==``; ODBC has no such escape.
    """
    i = text.find("=", pos)
    if odbc:
        return i
    while i != -1 and i + 1 < len(text) and text[i + 1] == "=":
        i = text.find("=", i + 2)
    return i


class KeyValueConnectionString:
    """Ordered ``key=value;`` connection string.

    The grammar is chosen once per string. ODBC strings (with a ``Driver``,
    ``DSN`` or ``FILEDSN`` key) wrap values in ``{...}`` and treat quotes as
    literal characters. ADO.NET strings quote values with ``"`` or ``'``,
    treat braces as literal and write ``=`` inside a key as ``==``.
    """

    def __init__(self, pairs: List[_Pair], odbc: bool = False):
        self._pairs = pairs
        self._odbc = odbc

    @classmethod
    def parse(cls, text: str) -> "KeyValueConnectionString":
        odbc = bool(ODBC_MARKER.search(text))
        pairs = []
        pos = 0
        length = len(text)
        while pos < length:
            segment_start = pos
            eq = _find_key_end(text, pos, odbc)
            semi = text.find(";", pos)

            if semi != -1 and (eq == -1 or semi < eq):
                # Segment without '=' is only allowed when blank (";;" or trailing ";").
                if text[pos:semi].strip():
                    raise InvalidConnectionString(
                        "Connection string segment is missing '='",
                        details={"segment": text[pos:semi].strip(), "position": pos},
                    )
                pos = semi + 1
                continue
            if eq == -1:
                if text[pos:].strip():
                    raise InvalidConnectionString(
                        "Connection string segment is missing '='",
                        details={"segment": text[pos:].strip(), "position": pos},
                    )
                break

            key = text[pos:eq].strip()
            if not odbc:
                key = key.replace("==", "=")
            if not key:
                raise InvalidConnectionString(
                    "Connection string contains an empty key",
                    details={"position": pos},
                )

            i = eq + 1
            while i < length and text[i] in " \t":
                i += 1

            if not odbc and i < length and text[i] in "\"'":
                value, i = _read_quoted(text, i, text[i])
            elif odbc and i < length and text[i] == "{":
                value, i = _read_braced(text, i)
            else:
                end = text.find(";", i)
                if end == -1:
                    end = length
                value = text[i:end].strip()
                i = end

            # Only whitespace may follow a quoted value before the separator.
            while i < length and text[i] in " \t":
                i += 1
            if i < length and text[i] != ";":
                raise InvalidConnectionString(
                    "Unexpected characters after quoted value",
                    details={"key": key, "position": i},
                )

            pairs.append(_Pair(key, value, text[segment_start:i]))
            pos = i + 1

        if not pairs:
            raise InvalidConnectionString("Connection string has no attributes")
        return cls(pairs, odbc)

    @property
    def is_odbc(self) -> bool:
        return self._odbc

    def get(self, key: str) -> Optional[str]:
        wanted = _normalise_key(key)
        found = None
        for pair in self._pairs:
            if pair.normalised_key == wanted:
                found = pair.value
        return found

    @property
    def database(self) -> Optional[str]:
        found = None
        for pair in self._pairs:
            if pair.normalised_key in DATABASE_KEYS:
                found = pair.value
        return found

    def _quote(self, value: str) -> str:
        opening = ("{",) if self._odbc else ("\"", "'")
        needs_quoting = (
            ";" in value
            or value != value.strip()
            or value[:1] in opening
        )
        if not needs_quoting:
            return value
        if self._odbc:
            return "{" + value.replace("}", "}}") + "}"
        if "\"" in value and "'" not in value:
            return f"'{value}'"
        return "\"" + value.replace("\"", "\"\"") + "\""

    def _render_key(self, key: str) -> str:
        return key if self._odbc else key.replace("=", "==")

    def with_database(self, database: str) -> "KeyValueConnectionString":
        """Return a copy whose target database is ``database``.

        The last catalog key wins, so that one is rewritten in place and any
        earlier duplicates are dropped. With no catalog key, ``Database`` is
        appended for ODBC strings and ``Initial Catalog`` otherwise.
        """
        indexes = [i for i, p in enumerate(self._pairs) if p.normalised_key in DATABASE_KEYS]
        pairs = list(self._pairs)
        if indexes:
            last = indexes[-1]
            key = pairs[last].key
            pairs[last] = _Pair(key, database, f"{self._render_key(key)}={self._quote(database)}")
            pairs = [p for i, p in enumerate(pairs) if i not in indexes[:-1]]
        else:
            key = "Database" if self._odbc else "Initial Catalog"
            pairs.append(_Pair(key, database, f"{key}={self._quote(database)}"))
        return KeyValueConnectionString(pairs, self._odbc)

    def render(self) -> str:
        return ";".join(p.raw for p in self._pairs) + ";"

    def __str__(self) -> str:
        return self.render()



class UrlConnectionString:
    """SQLAlchemy URL connection string."""

    def __init__(self, url: URL):
        self.url = url

    @classmethod
    def parse(cls, text: str) -> "UrlConnectionString":
        try:
            return cls(make_url(text))
        except (ArgumentError, ValueError) as e:
            raise InvalidConnectionString(
                f"Could not parse connection URL: {e}",
                details={"scheme": text.split("://", 1)[0]},
            ) from e

    def _odbc_connect(self) -> Optional[KeyValueConnectionString]:
        raw = self.url.query.get("odbc_connect")
        if raw is None:
            return None
        if isinstance(raw, tuple):
            raw = raw[-1]
        return KeyValueConnectionString.parse(raw)

    @property
    def database(self) -> Optional[str]:
        embedded = self._odbc_connect()
        if embedded is not None:
            return embedded.database
        return self.url.database

    def with_database(self, database: str) -> "UrlConnectionString":
        embedded = self._odbc_connect()
        if embedded is not None:
            rewritten = embedded.with_database(database).render()
            return UrlConnectionString(self.url.update_query_dict({"odbc_connect": rewritten}))
        return UrlConnectionString(self.url.set(database=database))

    def render(self) -> str:
        return self.url.render_as_string(hide_password=False)

    def __str__(self) -> str:
        return self.render()


def parse_connection_string(connection_string: str):
    """Parse ``connection_string`` into a URL or key/value descriptor.

    Raises InvalidConnectionString for empty input or malformed syntax.
    """
    if not isinstance(connection_string, str) or not connection_string.strip():
        raise InvalidConnectionString("Connection string is empty")

    text = connection_string.strip()
    if URL_SCHEME.match(text):
        return UrlConnectionString.parse(text)
    return KeyValueConnectionString.parse(connection_string)


def with_database(connection_string: str, database: str) -> str:
    """Rewrite the target database of ``connection_string`` to ``database``."""
    rewritten = parse_connection_string(connection_string).with_database(database).render()
    logger.debug("Rewrote connection string target database to %s", database)
    return rewritten
