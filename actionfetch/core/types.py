"""Core type definitions and enums for actionfetch."""

from enum import Enum


class HttpMethod(str, Enum):
    """Common HTTP methods (other tokens are accepted as-is)."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


# Methods that conventionally carry a request body
BODY_METHODS = frozenset({HttpMethod.POST.value, HttpMethod.PUT.value, HttpMethod.PATCH.value})


class TransportErrorKind(str, Enum):
    """Why an attempt failed to obtain a response."""

    TIMEOUT = "timeout"  # Deadline elapsed before a response arrived
    NETWORK = "network"  # DNS, connection refused, TLS, reset, ...


class OutcomeStatus(str, Enum):
    """Terminal outcome of one execute() call."""

    SUCCESS = "success"  # A response was obtained, whatever its status code
    EXHAUSTED = "exhausted"  # Every attempt ended in a transport failure
    CANCELLED = "cancelled"  # External cancel signal fired
