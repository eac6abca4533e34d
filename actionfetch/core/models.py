"""Core Pydantic data models for actionfetch."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from actionfetch.resilience.retry import backoff_delay_ms, backoff_schedule

from .exceptions import TransportError
from .types import BODY_METHODS, OutcomeStatus, TransportErrorKind


class RequestSpec(BaseModel):
    """Description of one HTTP request to perform."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(default="", description="Absolute target URL")
    method: str = Field(default="GET", description="HTTP method (upper-cased)")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Request headers (names case-insensitive)"
    )
    body: Optional[Union[str, bytes]] = Field(
        default=None, description="Payload, sent only for POST/PUT/PATCH"
    )
    timeout_ms: int = Field(
        default=30000, gt=0, description="Deadline per attempt in milliseconds"
    )

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value: Any) -> str:
        method = str(getattr(value, "value", value)).strip().upper()
        if not method:
            raise ValueError("method must not be empty")
        return method

    @field_validator("headers")
    @classmethod
    def _fold_headers(cls, value: Dict[str, str]) -> Dict[str, str]:
        # Later names win over earlier ones differing only by case
        folded: Dict[str, tuple] = {}
        for name, header_value in value.items():
            folded[name.lower()] = (name, header_value)
        return {name: header_value for name, header_value in folded.values()}

    @property
    def carries_body(self) -> bool:
        """Whether the body is attached for this method."""
        return self.method in BODY_METHODS

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


class RetryPolicy(BaseModel):
    """Bounded retry with exponential backoff."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    backoff_base_ms: int = Field(
        default=1000, gt=0, description="Delay before the first retry in milliseconds"
    )

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1

    def delay_before(self, attempt: int) -> int:
        """Backoff delay in milliseconds before the given 1-indexed attempt."""
        return backoff_delay_ms(attempt, self.backoff_base_ms)

    def schedule(self) -> List[int]:
        """Delays before every attempt, initial attempt included."""
        return backoff_schedule(self.max_retries, self.backoff_base_ms)


class TransportFailure(BaseModel):
    """A single attempt that produced no HTTP response."""

    model_config = ConfigDict(frozen=True)

    kind: TransportErrorKind = Field(..., description="Failure category")
    message: str = Field(..., description="Human-readable detail")
    attempt: int = Field(..., ge=1, description="Attempt number that failed")


class ParseFailure(BaseModel):
    """Payload decoding failure on an otherwise received response."""

    model_config = ConfigDict(frozen=True)

    content_type: str = Field(..., description="Content-Type the payload claimed")
    message: str = Field(..., description="Decoder error message")


class Success(BaseModel):
    """A response was obtained. Status interpretation is up to the caller."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal[OutcomeStatus.SUCCESS] = OutcomeStatus.SUCCESS
    status: int = Field(..., description="HTTP status code")
    headers: Dict[str, str] = Field(default_factory=dict, description="Response headers")
    body: Any = Field(default=None, description="Parsed JSON or raw text")
    content_type: str = Field(default="", description="Response Content-Type")
    parse_error: Optional[ParseFailure] = Field(
        default=None, description="Set when a JSON payload failed to decode"
    )
    attempts_made: int = Field(..., ge=1, description="Attempts used")
    backoff_ms: int = Field(default=0, ge=0, description="Total backoff waited")

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status < 300


class Exhausted(BaseModel):
    """Every attempt ended in a transport failure."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal[OutcomeStatus.EXHAUSTED] = OutcomeStatus.EXHAUSTED
    last_error: TransportFailure = Field(..., description="Failure of the final attempt")
    attempts_made: int = Field(..., ge=1, description="Attempts used")
    backoff_ms: int = Field(default=0, ge=0, description="Total backoff waited")

    def raise_for_outcome(self) -> None:
        """Raise the last transport failure as an exception."""
        raise TransportError(
            self.last_error.kind, self.last_error.message, self.attempts_made
        )


class Cancelled(BaseModel):
    """The cancel signal fired before a terminal outcome."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal[OutcomeStatus.CANCELLED] = OutcomeStatus.CANCELLED
    attempts_made: int = Field(default=0, ge=0, description="Attempts started")
    backoff_ms: int = Field(default=0, ge=0, description="Total backoff waited")


ExecutionResult = Union[Success, Exhausted, Cancelled]


class RequestFile(BaseModel):
    """Request definition loaded from a YAML file."""

    model_config = ConfigDict(frozen=True)

    request: RequestSpec = Field(..., description="Request to perform")
    retry: RetryPolicy = Field(default_factory=RetryPolicy, description="Retry policy")
