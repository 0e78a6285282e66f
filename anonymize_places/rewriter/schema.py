"""Choosing which tables and columns a rewrite touches.

Two discovery modes:

* ``generic``: introspect the live schema and anonymize every column of every
  user table. Non-text values pass through the SQL function unchanged, so
  numeric columns survive without being listed.
* ``places``: a fixed list for Firefox ``places.sqlite`` that only names the
  identifying text columns, deletes auxiliary tables with no useful
  anonymized form, and resets the URL hash.
"""

import sqlite3
from collections.abc import Iterable

from anonymize_places.rewriter.exceptions import StorageFailureError
from anonymize_places.rewriter.models import ColumnSpec, Treatment

SYSTEM_TABLES: frozenset[str] = frozenset(
    {"sqlite_sequence", "sqlite_stat1", "sqlite_stat2", "sqlite_stat3", "sqlite_stat4"}
)

# Derived from the URL; a stale value lets the original be brute-forced offline.
URL_HASH_RESET = ColumnSpec("moz_places", "url_hash", Treatment.SET_CONSTANT, constant=0)

# Added in Firefox 50; older databases have no hash to leak.
_URL_HASH_RESET_IF_PRESENT = ColumnSpec(
    "moz_places", "url_hash", Treatment.SET_CONSTANT, constant=0, optional=True
)

PLACES_SPECS: tuple[ColumnSpec, ...] = (
    # Present in every supported schema.
    ColumnSpec("moz_places", "url", Treatment.ANONYMIZE),
    ColumnSpec("moz_places", "title", Treatment.COALESCE_ANONYMIZE),
    ColumnSpec("moz_places", "rev_host", Treatment.COALESCE_ANONYMIZE),
    ColumnSpec("moz_bookmarks", "title", Treatment.COALESCE_ANONYMIZE),
    ColumnSpec("moz_annos", None, Treatment.DELETE_ROWS),
    ColumnSpec("moz_inputhistory", None, Treatment.DELETE_ROWS),
    ColumnSpec("moz_keywords", None, Treatment.DELETE_ROWS),
    # Depend on the Firefox version that wrote the database.
    ColumnSpec("moz_places", "description", Treatment.COALESCE_ANONYMIZE, optional=True),
    ColumnSpec(
        "moz_places", "preview_image_url", Treatment.COALESCE_ANONYMIZE, optional=True
    ),
    _URL_HASH_RESET_IF_PRESENT,
    ColumnSpec("moz_origins", "host", Treatment.ANONYMIZE, optional=True),  # Firefox 62+
    ColumnSpec("moz_hosts", None, Treatment.DELETE_ROWS, optional=True),  # before Firefox 62
    ColumnSpec("moz_items_annos", None, Treatment.DELETE_ROWS, optional=True),
    ColumnSpec("moz_bookmarks_deleted", None, Treatment.DELETE_ROWS, optional=True),
)


def quote_identifier(name: str) -> str:
    """Quote a table or column name for direct use in SQL."""
    return '"' + name.replace('"', '""') + '"'


def list_tables(conn: sqlite3.Connection, excluded: Iterable[str] = ()) -> list[str]:
    """Names of user tables, skipping SQLite's own and any in *excluded*."""
    skip = SYSTEM_TABLES | set(excluded)
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
    ).fetchall()
    return [row[0] for row in rows if row[0] not in skip]


def table_columns(conn: sqlite3.Connection, table: str) -> list[str]:
    """Column names of *table*; empty when the table does not exist."""
    rows = conn.execute(f"PRAGMA table_info({quote_identifier(table)})").fetchall()
    return [row[1] for row in rows]


def generic_specs(
    conn: sqlite3.Connection,
    excluded: Iterable[str] = (),
) -> list[ColumnSpec]:
    """Anonymize every column of every user table in the live schema."""
    specs: list[ColumnSpec] = []
    has_url_hash = False
    for table in list_tables(conn, excluded):
        for column in table_columns(conn, table):
            specs.append(ColumnSpec(table, column, Treatment.ANONYMIZE))
            if (table, column) == (URL_HASH_RESET.table, URL_HASH_RESET.column):
                has_url_hash = True
    if has_url_hash:
        specs.append(URL_HASH_RESET)
    return specs


def places_specs() -> list[ColumnSpec]:
    """The hand-maintained list for Firefox places databases."""
    return list(PLACES_SPECS)


def build_specs(
    conn: sqlite3.Connection,
    mode: str,
    excluded: Iterable[str] = (),
) -> list[ColumnSpec]:
    """Compute the column specs for *mode* (``generic`` or ``places``)."""
    if mode == "generic":
        try:
            return generic_specs(conn, excluded)
        except sqlite3.Error as exc:
            raise StorageFailureError(f"Could not read schema: {exc}") from exc
    if mode == "places":
        return places_specs()
    raise ValueError(f"Unknown discovery mode '{mode}'. Choose from: ['generic', 'places']")
