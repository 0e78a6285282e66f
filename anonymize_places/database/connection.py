import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from anonymize_places.rewriter.exceptions import StorageFailureError


def open_database(path: Path | str) -> sqlite3.Connection:
    """Open an existing SQLite file read-write.

    Raises:
        StorageFailureError: if the file is missing or is not a SQLite database.
    """
    uri = f"{Path(path).resolve().as_uri()}?mode=rw"
    try:
        conn = sqlite3.connect(uri, uri=True)
    except sqlite3.Error as exc:
        raise StorageFailureError(f"Could not open {path} read-write: {exc}") from exc
    try:
        # connect() is lazy; reading the header catches non-database files.
        conn.execute("PRAGMA schema_version").fetchone()
    except sqlite3.Error as exc:
        conn.close()
        raise StorageFailureError(f"Could not open {path} read-write: {exc}") from exc
    return conn


@contextmanager
def get_connection(path: Path | str) -> Generator[sqlite3.Connection, None, None]:
    """Yield a read-write connection to *path*. Caller manages commit/rollback."""
    conn = open_database(path)
    try:
        yield conn
    finally:
        conn.close()
