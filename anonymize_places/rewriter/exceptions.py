class RewriteFailedError(Exception):
    """Base exception for a rewrite that did not complete."""


class SchemaMismatchError(RewriteFailedError):
    """Raised when a targeted table or column does not exist in the database."""


class StorageFailureError(RewriteFailedError):
    """Raised when the storage layer fails to open, read, write, or commit."""
