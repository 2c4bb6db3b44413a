"""Domain errors raised by the services and rendered by the API as ``{"error": message}``."""


class ReceivablesError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ReceivablesError):
    """Malformed or missing input."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class AuthenticationError(ReceivablesError):
    """Bad or missing credentials or token."""

    status_code = 401


class NotFoundError(ReceivablesError):
    status_code = 404


class ConflictError(ReceivablesError):
    """Illegal state transition, e.g. editing a paid invoice."""

    status_code = 409
