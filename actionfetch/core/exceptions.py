"""Custom exceptions for actionfetch."""

from .types import TransportErrorKind


class ActionFetchError(Exception):
    """Base exception for all actionfetch errors."""

    pass


class ConfigurationError(ActionFetchError):
    """Raised when request configuration is missing or malformed."""

    pass


class ValidationError(ActionFetchError):
    """Raised when a request definition fails validation."""

    pass


class TransportError(ActionFetchError):
    """Raised when no HTTP response could be obtained."""

    def __init__(self, kind: TransportErrorKind, message: str, attempts_made: int = 0):
        self.kind = kind
        self.attempts_made = attempts_made
        super().__init__(f"{kind.value}: {message}")


class ParseError(ActionFetchError):
    """Raised when a response payload cannot be decoded."""

    def __init__(self, content_type: str, message: str):
        self.content_type = content_type
        super().__init__(f"Cannot parse {content_type} payload: {message}")
