"""Custom exceptions for API."""


class SessionNotFoundError(Exception):
    """Raised when a binding session is not found."""

    pass


class InvalidSessionIdError(Exception):
    """Raised when a session ID is malformed."""

    pass


class BindingNotReadyError(Exception):
    """Raised when a binding is requested before a table and columns are set."""

    pass
