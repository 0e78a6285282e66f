class WorkspaceError(Exception):
    """Base exception for preparing the working copy."""


class OutputExistsError(WorkspaceError):
    """Raised when the output path exists and overwriting was not requested."""


class SameFileError(WorkspaceError):
    """Raised when the output path points at the source database itself."""
