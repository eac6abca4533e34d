"""Core infrastructure for actionfetch."""

from .config import GlobalConfig, config, get_config, parse_headers, reload_config
from .exceptions import (
    ActionFetchError,
    ConfigurationError,
    ParseError,
    TransportError,
    ValidationError,
)
from .models import (
    Cancelled,
    ExecutionResult,
    Exhausted,
    ParseFailure,
    RequestFile,
    RequestSpec,
    RetryPolicy,
    Success,
    TransportFailure,
)
from .types import BODY_METHODS, HttpMethod, OutcomeStatus, TransportErrorKind

__all__ = [
    # Types
    "HttpMethod",
    "TransportErrorKind",
    "OutcomeStatus",
    "BODY_METHODS",
    # Exceptions
    "ActionFetchError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "ParseError",
    # Models
    "RequestSpec",
    "RetryPolicy",
    "TransportFailure",
    "ParseFailure",
    "Success",
    "Exhausted",
    "Cancelled",
    "ExecutionResult",
    "RequestFile",
    # Config
    "GlobalConfig",
    "config",
    "get_config",
    "reload_config",
    "parse_headers",
]
