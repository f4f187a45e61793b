"""Custom exception classes for the application."""
from typing import Any


class AppException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, detail: Any = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class NotFoundError(AppException):
    """Resource not found."""
    pass


class InvalidCityError(NotFoundError):
    """City slug is not one of the configured partitions."""
    pass


class DuplicateError(AppException):
    """Duplicate resource detected."""
    pass


class DataSourceError(AppException):
    """The database query failed (connection, malformed query, ...)."""
    pass


class ValidationError(AppException):
    """Data validation error."""
    pass
