"""Custom exceptions for the CRM core."""


class CRMException(Exception):
    """Base exception for the CRM core."""

    pass


class ValidationError(CRMException):
    """Raised when a record or aggregation input is malformed."""

    pass


class NotFoundError(CRMException):
    """Raised when a record is not found in a record store."""

    pass


class StateError(CRMException):
    """Raised when a transition is attempted from a state that does not allow it."""

    pass


class DatabaseError(CRMException):
    """Raised when a database operation fails."""

    pass


class ConfigurationError(CRMException):
    """Raised when configuration is invalid."""

    pass
