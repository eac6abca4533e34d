"""Request execution."""

from .content import parse_payload
from .request_executor import RequestExecutor, execute

__all__ = [
    "RequestExecutor",
    "execute",
    "parse_payload",
]
