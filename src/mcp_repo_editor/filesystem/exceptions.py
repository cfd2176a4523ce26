"""
This module defines custom exceptions for the repository file operations.
"""


class RepositoryEditorError(Exception):
    """Base class for all repository editor exceptions."""
    pass


class RepositoryNotFoundError(RepositoryEditorError):
    """Raised when the working directory is not inside a git working tree."""
    pass


class FileNotFoundInRepositoryError(RepositoryEditorError, FileNotFoundError):
    """Raised when an operation targets a file that does not exist."""
    pass


class FileAlreadyExistsError(RepositoryEditorError, FileExistsError):
    """Raised when an operation would overwrite an existing file."""
    pass


class MissingParameterError(RepositoryEditorError):
    """Raised when a required argument for the requested mode is missing."""
    pass


class InvalidRangeError(RepositoryEditorError, ValueError):
    """Raised when a line range is not expressed as 1-based line numbers."""
    pass


class PathOutsideRepositoryError(RepositoryEditorError, PermissionError):
    """Raised when a request path resolves outside the repository root."""
    pass
