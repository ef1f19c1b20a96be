"""DDL and error classification for the ``carts`` table.

The table is owned by this app but is created lazily at runtime rather than
through a migration, so deployments that predate it keep working until the
first cart operation provisions it.
"""
from typing import Dict

from django.db import DatabaseError

CART_TABLE = "carts"
CART_INDEX = "idx_carts_user"

UNDEFINED_TABLE_CODES = frozenset({"42P01"})
# duplicate_table, duplicate_object, and the pg_type unique violation raised
# when two sessions race on CREATE TABLE IF NOT EXISTS
DUPLICATE_OBJECT_CODES = frozenset({"42P07", "42710", "23505"})

_POSTGRES_TABLE = f"""
CREATE TABLE IF NOT EXISTS {CART_TABLE} (
    id SERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
    cart_data JSONB NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

_SQLITE_TABLE = f"""
CREATE TABLE IF NOT EXISTS {CART_TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id BIGINT NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
    cart_data TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

_INDEX = f"CREATE INDEX IF NOT EXISTS {CART_INDEX} ON {CART_TABLE}(user_id)"

_TABLE_DDL: Dict[str, str] = {
    "postgresql": _POSTGRES_TABLE,
    "sqlite": _SQLITE_TABLE,
}

_JSON_PLACEHOLDER: Dict[str, str] = {
    "postgresql": "%s::jsonb",
}


class UnsupportedVendorError(DatabaseError):
    pass


def create_statements(vendor: str) -> tuple:
    """Return the ordered DDL statements for ``vendor``."""
    try:
        table = _TABLE_DDL[vendor]
    except KeyError:
        raise UnsupportedVendorError(
            f"Cart storage is not available on '{vendor}' databases"
        ) from None
    return (table.strip(), _INDEX)


def json_placeholder(vendor: str) -> str:
    return _JSON_PLACEHOLDER.get(vendor, "%s")


def _error_code(exc: BaseException):
    for candidate in (exc, exc.__cause__):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return code
    return None


def _message(exc: BaseException) -> str:
    parts = [str(exc)]
    if exc.__cause__ is not None:
        parts.append(str(exc.__cause__))
    return " ".join(parts).lower()


def is_undefined_table(exc: BaseException) -> bool:
    """True when ``exc`` reports that the queried table does not exist."""
    code = _error_code(exc)
    if code is not None:
        return code in UNDEFINED_TABLE_CODES
    message = _message(exc)
    if "no such table" in message:
        return True
    return "relation" in message and "does not exist" in message


def is_duplicate_object(exc: BaseException) -> bool:
    """True when ``exc`` reports that the object being created already exists."""
    code = _error_code(exc)
    if code is not None and code in DUPLICATE_OBJECT_CODES:
        return True
    return "already exists" in _message(exc)
