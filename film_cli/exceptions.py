"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class FilmCliError(Exception):
    """Base exception for all application-specific errors."""


class NetworkError(FilmCliError):
    """Raised when an HTTP request returns a bad status or the transport fails."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class StorageError(FilmCliError):
    """Raised for generic failures of the local film database."""


class ConstraintError(StorageError):
    """Raised when saving a film whose URL is already in the local store."""


class NotFoundError(FilmCliError):
    """Raised when a catalog item or stored film cannot be found."""


class CatalogError(FilmCliError):
    """Raised when the film catalog cannot be read or parsed."""


class ConfigurationError(FilmCliError):
    """Raised for issues related to configuration loading or validation."""
