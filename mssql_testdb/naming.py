"""Unique, length-bounded database names for test isolation."""

import uuid
from typing import Optional

# SQL Server rejects long catalog names (documented limit is around 125),
# so keep a margin.
MAX_DATABASE_NAME_LENGTH = 100


def new_suffix() -> str:
    """Return a fresh 32-character lowercase hex token."""
    return uuid.uuid4().hex


def unique_database_name(database_name: str, suffix: Optional[str] = None) -> str:
    """Append a unique suffix to ``database_name``, truncating if too long.

    When ``database_name + suffix`` exceeds ``MAX_DATABASE_NAME_LENGTH`` the
    combined string is cut to leave room for the suffix, then ``_`` and the
    full suffix are appended. The truncated result is therefore one
    separator plus one suffix longer than the slice:

        'a' * 90  ->  'a' * 68 + '_' + suffix   (101 chars)
    """
    if suffix is None:
        suffix = new_suffix()

    unique_name = f"{database_name}{suffix}"
    if len(unique_name) > MAX_DATABASE_NAME_LENGTH:
        truncated = unique_name[: MAX_DATABASE_NAME_LENGTH - len(suffix)]
        unique_name = f"{truncated}_{suffix}"
    return unique_name
