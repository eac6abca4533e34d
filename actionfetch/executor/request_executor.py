"""Bounded-retry HTTP request executor."""

import asyncio
import logging
from typing import Awaitable, Callable, NamedTuple, Optional, Union
from urllib.parse import urlsplit

import httpx

from actionfetch.core.exceptions import ConfigurationError, ParseError
from actionfetch.core.models import (
    Cancelled,
    ExecutionResult,
    Exhausted,
    ParseFailure,
    RequestSpec,
    RetryPolicy,
    Success,
    TransportFailure,
)
from actionfetch.core.types import TransportErrorKind

from .content import parse_payload

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]

# Marker returned by an attempt or backoff interrupted by the cancel signal
_CANCELLED = object()


class _Received(NamedTuple):
    """A response whose body was read, or failed to decode."""

    response: httpx.Response
    decode_error: Optional[httpx.DecodingError] = None


class RequestExecutor:
    """Perform a request with a per-attempt deadline and exponential backoff.

    Only transport failures (deadline exceeded, connection errors) are
    retried. Any HTTP response, 4xx and 5xx included, ends the loop as a
    ``Success`` and the caller decides what the status means.

    Example:
        ```python
        executor = RequestExecutor()
        result = await executor.execute(
            RequestSpec(url="https://api.example.com/items", timeout_ms=5000),
            RetryPolicy(max_retries=2, backoff_base_ms=1000),
        )
        if isinstance(result, Success) and result.ok:
            print(result.body)
        ```
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize request executor.

        Args:
            client: Caller-owned client to send through; never closed here
            transport: Transport for the per-call client when no client is given
            sleep: Coroutine used for backoff suspension
        """
        self._client = client
        self._transport = transport
        self._sleep = sleep

    async def execute(
        self,
        spec: RequestSpec,
        policy: RetryPolicy,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ExecutionResult:
        """Run the request until a response, exhaustion, or cancellation.

        Args:
            spec: Request to perform
            policy: Retry policy
            cancel_event: Optional signal that aborts the current attempt
                or backoff and short-circuits to ``Cancelled``

        Returns:
            Success, Exhausted or Cancelled

        Raises:
            ConfigurationError: If the URL is empty or not absolute
        """
        self._validate(spec)

        if self._client is not None:
            return await self._run(self._client, spec, policy, cancel_event)

        async with httpx.AsyncClient(transport=self._transport) as client:
            return await self._run(client, spec, policy, cancel_event)

    @staticmethod
    def _validate(spec: RequestSpec) -> None:
        if not spec.url or not spec.url.strip():
            raise ConfigurationError("Request URL is required")

        parts = urlsplit(spec.url)
        if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(f"Request URL must be absolute http(s): {spec.url}")

    async def _run(
        self,
        client: httpx.AsyncClient,
        spec: RequestSpec,
        policy: RetryPolicy,
        cancel_event: Optional[asyncio.Event],
    ) -> ExecutionResult:
        total = policy.total_attempts
        backoff_ms = 0
        attempt = 1

        while True:
            if attempt > 1:
                delay_ms = policy.delay_before(attempt)
                logger.info(f"Backing off {delay_ms}ms before attempt {attempt}/{total}")
                if await self._backoff(delay_ms, cancel_event) is _CANCELLED:
                    return self._cancelled(spec, attempt - 1, backoff_ms)
                backoff_ms += delay_ms

            logger.info(f"Attempt {attempt}/{total}: {spec.method} {spec.url}")
            outcome = await self._attempt(client, spec, attempt, cancel_event)

            if outcome is _CANCELLED:
                return self._cancelled(spec, attempt, backoff_ms)

            if isinstance(outcome, _Received):
                return self._success(spec, outcome, attempt, backoff_ms)

            logger.warning(
                f"Attempt {attempt}/{total} failed ({outcome.kind.value}): {outcome.message}"
            )
            if attempt >= total:
                logger.error(
                    f"{spec.method} {spec.url} exhausted after {attempt} attempts: "
                    f"{outcome.kind.value}"
                )
                return Exhausted(last_error=outcome, attempts_made=attempt, backoff_ms=backoff_ms)

            attempt += 1

    async def _backoff(self, delay_ms: int, cancel_event: Optional[asyncio.Event]) -> object:
        if cancel_event is None:
            await self._sleep(delay_ms / 1000.0)
            return None

        sleeper = asyncio.ensure_future(self._sleep(delay_ms / 1000.0))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            await _cancel_pending(sleeper, waiter)

        if sleeper in done:
            return None
        return _CANCELLED

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        spec: RequestSpec,
        attempt: int,
        cancel_event: Optional[asyncio.Event],
    ) -> Union[_Received, TransportFailure, object]:
        request = client.build_request(
            spec.method,
            spec.url,
            headers=spec.headers,
            content=spec.body if spec.carries_body else None,
            timeout=spec.timeout_seconds,
        )

        sender = asyncio.ensure_future(_receive(client, request))
        waiters = {sender}
        canceller = None
        if cancel_event is not None:
            canceller = asyncio.ensure_future(cancel_event.wait())
            waiters.add(canceller)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=spec.timeout_seconds, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            # Deadline or cancel: abort the in-flight send and release its connection
            await _cancel_pending(*waiters)

        if sender in done:
            error = sender.exception()
            if error is None:
                return sender.result()
            if isinstance(error, httpx.TimeoutException):
                return TransportFailure(
                    kind=TransportErrorKind.TIMEOUT, message=_describe(error), attempt=attempt
                )
            if isinstance(error, httpx.TransportError):
                return TransportFailure(
                    kind=TransportErrorKind.NETWORK, message=_describe(error), attempt=attempt
                )
            raise error

        if canceller is not None and canceller in done:
            return _CANCELLED

        return TransportFailure(
            kind=TransportErrorKind.TIMEOUT,
            message=f"No response within {spec.timeout_ms}ms",
            attempt=attempt,
        )

    @staticmethod
    def _success(
        spec: RequestSpec, received: _Received, attempt: int, backoff_ms: int
    ) -> Success:
        response = received.response
        content_type = response.headers.get("content-type", "")
        parse_error = None
        body = None
        if received.decode_error is not None:
            encoding = response.headers.get("content-encoding", "identity")
            failure = ParseError(content_type or encoding, _describe(received.decode_error))
            logger.warning(f"Response from {spec.url} has a corrupt {encoding} body: {failure}")
            parse_error = ParseFailure(content_type=content_type, message=str(failure))
        else:
            try:
                body = parse_payload(response)
            except ParseError as e:
                logger.warning(f"Response from {spec.url} is not valid JSON: {e}")
                body = response.text
                parse_error = ParseFailure(content_type=content_type, message=str(e))

        logger.info(
            f"{spec.method} {spec.url} -> {response.status_code} "
            f"after {attempt} attempt(s)"
        )
        return Success(
            status=response.status_code,
            headers=dict(response.headers),
            body=body,
            content_type=content_type,
            parse_error=parse_error,
            attempts_made=attempt,
            backoff_ms=backoff_ms,
        )

    @staticmethod
    def _cancelled(spec: RequestSpec, attempts_made: int, backoff_ms: int) -> Cancelled:
        logger.warning(f"{spec.method} {spec.url} cancelled after {attempts_made} attempt(s)")
        return Cancelled(attempts_made=attempts_made, backoff_ms=backoff_ms)


async def _receive(client: httpx.AsyncClient, request: httpx.Request) -> _Received:
    """Send and read the body so both happen inside the attempt deadline."""
    response = await client.send(request, stream=True)
    try:
        await response.aread()
    except httpx.DecodingError as e:
        # Body arrived but its Content-Encoding is corrupt
        return _Received(response, e)
    finally:
        await response.aclose()
    return _Received(response)


async def _cancel_pending(*tasks: "asyncio.Future") -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


def _describe(error: Exception) -> str:
    return f"{type(error).__name__}: {error}" if str(error) else type(error).__name__


async def execute(
    spec: RequestSpec,
    policy: Optional[RetryPolicy] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> ExecutionResult:
    """Execute a request with a fresh client and the given (or default) policy."""
    return await RequestExecutor().execute(spec, policy or RetryPolicy(), cancel_event)
