"""actionfetch - HTTP requests with deadlines and bounded retries for CI steps."""

from .core import (
    # Exceptions
    ActionFetchError,
    Cancelled,
    ConfigurationError,
    ExecutionResult,
    Exhausted,
    # Config
    GlobalConfig,
    # Types
    HttpMethod,
    OutcomeStatus,
    ParseError,
    ParseFailure,
    RequestFile,
    # Models
    RequestSpec,
    RetryPolicy,
    Success,
    TransportError,
    TransportErrorKind,
    TransportFailure,
    ValidationError,
    config,
    get_config,
    reload_config,
)
from .executor import RequestExecutor, execute

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Types
    "HttpMethod",
    "TransportErrorKind",
    "OutcomeStatus",
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
    # Executor
    "RequestExecutor",
    "execute",
    # Config
    "GlobalConfig",
    "config",
    "get_config",
    "reload_config",
]
