"""Result reporting: exit codes, console rendering and step outputs."""

import json
import logging
import uuid
from pathlib import Path
from typing import Dict, Union

from rich.console import Console
from rich.markup import escape

from actionfetch.core.models import Cancelled, ExecutionResult, Exhausted, Success

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


def exit_code_for(result: ExecutionResult, fail_on_error_status: bool = True) -> int:
    """Map a terminal outcome to a process exit code."""
    if isinstance(result, Success):
        if result.ok or not fail_on_error_status:
            return EXIT_OK
        return EXIT_FAILURE
    if isinstance(result, Cancelled):
        return EXIT_CANCELLED
    return EXIT_FAILURE


def render_body(result: Success) -> str:
    if isinstance(result.body, str):
        return result.body
    return json.dumps(result.body, indent=2)


def print_result(console: Console, result: ExecutionResult) -> None:
    """Print a human-readable summary of the result."""
    if isinstance(result, Success):
        color = "green" if result.ok else "yellow"
        console.print(
            f"[{color}]HTTP {result.status}[/{color}] "
            f"after {result.attempts_made} attempt(s)"
        )
        if result.parse_error is not None:
            console.print(f"[yellow]Warning: {escape(result.parse_error.message)}[/yellow]")
        if isinstance(result.body, str):
            console.print(result.body, markup=False, highlight=False)
        else:
            console.print_json(data=result.body)
    elif isinstance(result, Exhausted):
        console.print(
            f"[red]Request failed after {result.attempts_made} attempt(s): "
            f"{result.last_error.kind.value}: {escape(result.last_error.message)}[/red]"
        )
    else:
        console.print(
            f"[yellow]Request cancelled after {result.attempts_made} attempt(s)[/yellow]"
        )


def result_outputs(result: ExecutionResult) -> Dict[str, str]:
    """Step output values for a result."""
    outputs = {
        "outcome": result.outcome.value,
        "attempts": str(result.attempts_made),
    }
    if isinstance(result, Success):
        outputs["status"] = str(result.status)
        outputs["body"] = render_body(result)
    elif isinstance(result, Exhausted):
        outputs["error"] = result.last_error.message
    return outputs


def write_github_outputs(output_path: Union[str, Path], result: ExecutionResult) -> None:
    """Append step outputs to a GitHub Actions output file.

    Multi-line values use the heredoc delimiter syntax.
    """
    path = Path(output_path)
    lines = []
    for name, value in result_outputs(result).items():
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
            lines.append(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            lines.append(f"{name}={value}\n")

    with open(path, "a", encoding="utf-8") as f:
        f.writelines(lines)

    logger.debug(f"Wrote {len(lines)} step outputs to {path}")
