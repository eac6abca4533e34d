"""Command-line interface for actionfetch."""

import asyncio
import logging
import signal
import sys
from typing import Optional, Tuple

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape

from actionfetch import __version__
from actionfetch.core.config import get_config, parse_headers
from actionfetch.core.exceptions import ActionFetchError, ConfigurationError, ValidationError
from actionfetch.core.models import ExecutionResult, RequestSpec, RetryPolicy
from actionfetch.executor import RequestExecutor
from actionfetch.parsers import parse_request_file, validate_request_file

from .outputs import exit_code_for, print_result, write_github_outputs

console = Console()
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="actionfetch")
@click.option("--log-level", default=None, help="Logging level (default from ACTIONFETCH_LOG_LEVEL)")
def cli(log_level: Optional[str]) -> None:
    """actionfetch - HTTP requests with deadlines and retries for CI steps."""
    config = get_config()
    logging.basicConfig(
        level=(log_level or config.log_level).upper(),
        format=config.log_format,
    )


@cli.command()
@click.argument("url")
@click.option("-X", "--method", default="GET", show_default=True, help="HTTP method")
@click.option("-H", "--header", "headers", multiple=True, help="Header as 'Name: value'")
@click.option("-d", "--data", "body", default=None, help="Request body (POST/PUT/PATCH)")
@click.option("--timeout-ms", default=30000, show_default=True, type=int, help="Deadline per attempt")
@click.option("--max-retries", default=3, show_default=True, type=int, help="Retries after the first attempt")
@click.option("--backoff-base-ms", default=1000, show_default=True, type=int, help="Delay before the first retry")
@click.option("--allow-error-status", is_flag=True, help="Exit 0 for non-2xx responses")
def call(
    url: str,
    method: str,
    headers: Tuple[str, ...],
    body: Optional[str],
    timeout_ms: int,
    max_retries: int,
    backoff_base_ms: int,
    allow_error_status: bool,
) -> None:
    """Call a URL with retries.

    Example:
        actionfetch call https://api.example.com/items -H "Accept: application/json"
    """
    try:
        spec = RequestSpec(
            url=url,
            method=method,
            headers=parse_headers("\n".join(headers)),
            body=body,
            timeout_ms=timeout_ms,
        )
        policy = RetryPolicy(max_retries=max_retries, backoff_base_ms=backoff_base_ms)
    except (ConfigurationError, PydanticValidationError) as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(1)

    sys.exit(_run_request(spec, policy, fail_on_error_status=not allow_error_status))


@cli.command()
@click.argument("request_path", type=click.Path(exists=True))
@click.option("--allow-error-status", is_flag=True, help="Exit 0 for non-2xx responses")
def run(request_path: str, allow_error_status: bool) -> None:
    """Run a request from a YAML definition.

    Example:
        actionfetch run requests/list_items.yaml
    """
    try:
        console.print(f"[cyan]Loading request: {request_path}[/cyan]")
        definition = parse_request_file(request_path)
    except (ConfigurationError, ValidationError) as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(1)

    sys.exit(
        _run_request(
            definition.request, definition.retry, fail_on_error_status=not allow_error_status
        )
    )


@cli.command()
def env() -> None:
    """Run the request described by INPUT_* environment variables.

    This is the entrypoint used inside a GitHub Actions step.
    """
    config = get_config()
    try:
        spec = config.to_request_spec()
        policy = config.to_retry_policy()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(1)

    sys.exit(_run_request(spec, policy, fail_on_error_status=config.fail_on_error_status))


@cli.command()
@click.argument("request_path", type=click.Path(exists=True))
def validate(request_path: str) -> None:
    """Validate a request YAML definition.

    Example:
        actionfetch validate requests/list_items.yaml
    """
    try:
        console.print(f"[cyan]Validating request: {request_path}[/cyan]")

        if validate_request_file(request_path):
            definition = parse_request_file(request_path)
            console.print("[green]✓ Request is valid[/green]")
            console.print(f"  {definition.request.method} {definition.request.url}")
            console.print(f"  Timeout: {definition.request.timeout_ms}ms")
            console.print(
                f"  Attempts: {definition.retry.total_attempts} "
                f"(backoff {definition.retry.schedule()[1:]}ms)"
            )
            sys.exit(0)
        else:
            console.print("[red]✗ Request is invalid[/red]")
            sys.exit(1)

    except (ConfigurationError, ValidationError) as e:
        console.print(f"[red]✗ Validation failed: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
def version() -> None:
    """Show actionfetch version."""
    console.print(f"actionfetch version {__version__}")


def _run_request(spec: RequestSpec, policy: RetryPolicy, fail_on_error_status: bool) -> int:
    """Execute, report and return the exit code."""
    try:
        result = asyncio.run(_execute(spec, policy))
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        return 1
    except ActionFetchError as e:
        console.print(f"[red]Request error: {escape(str(e))}[/red]")
        return 1
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        return 1

    print_result(console, result)

    output_path = get_config().github_output
    if output_path:
        write_github_outputs(output_path, result)

    return exit_code_for(result, fail_on_error_status)


async def _execute(spec: RequestSpec, policy: RetryPolicy) -> ExecutionResult:
    """Execute with SIGINT/SIGTERM wired to the cancel signal."""
    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, cancel_event.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError) as e:
            # No loop signal handlers on Windows or outside the main thread
            logger.debug(f"Cannot install handler for {sig.name}: {e}")

    try:
        return await RequestExecutor().execute(spec, policy, cancel_event)
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


if __name__ == "__main__":
    cli()
