"""Unit tests for result reporting."""

from rich.console import Console

from actionfetch.cli.outputs import (
    EXIT_CANCELLED,
    EXIT_FAILURE,
    EXIT_OK,
    exit_code_for,
    print_result,
    result_outputs,
    write_github_outputs,
)
from actionfetch.core.models import Cancelled, Exhausted, Success, TransportFailure
from actionfetch.core.types import TransportErrorKind


def exhausted():
    failure = TransportFailure(
        kind=TransportErrorKind.TIMEOUT, message="No response within 50ms", attempt=2
    )
    return Exhausted(last_error=failure, attempts_made=2, backoff_ms=1000)


class TestExitCodes:
    """Test exit_code_for."""

    def test_success_2xx(self):
        assert exit_code_for(Success(status=200, attempts_made=1)) == EXIT_OK

    def test_error_status(self):
        """Non-2xx fails unless allowed."""
        result = Success(status=502, attempts_made=1)

        assert exit_code_for(result) == EXIT_FAILURE
        assert exit_code_for(result, fail_on_error_status=False) == EXIT_OK

    def test_exhausted(self):
        assert exit_code_for(exhausted(), fail_on_error_status=False) == EXIT_FAILURE

    def test_cancelled(self):
        assert exit_code_for(Cancelled(attempts_made=1)) == EXIT_CANCELLED


class TestResultOutputs:
    """Test step output values."""

    def test_success_outputs(self):
        """JSON bodies are rendered as JSON text."""
        outputs = result_outputs(Success(status=200, body={"a": 1}, attempts_made=2))

        assert outputs["outcome"] == "success"
        assert outputs["status"] == "200"
        assert outputs["attempts"] == "2"
        assert outputs["body"] == '{\n  "a": 1\n}'

    def test_exhausted_outputs(self):
        outputs = result_outputs(exhausted())

        assert outputs == {
            "outcome": "exhausted",
            "attempts": "2",
            "error": "No response within 50ms",
        }

    def test_write_github_outputs(self, tmp_path):
        """Single-line values use name=value, multi-line use a delimiter."""
        path = tmp_path / "output"
        path.write_text("previous=1\n")

        write_github_outputs(path, Success(status=201, body="line1\nline2", attempts_made=1))

        lines = path.read_text().splitlines()
        assert lines[0] == "previous=1"
        assert "status=201" in lines
        assert "outcome=success" in lines

        start = next(i for i, line in enumerate(lines) if line.startswith("body<<"))
        delimiter = lines[start].split("<<", 1)[1]
        assert lines[start + 1 : start + 3] == ["line1", "line2"]
        assert lines[start + 3] == delimiter


class TestPrintResult:
    """Test console rendering."""

    def test_print_exhausted(self):
        console = Console(record=True, width=200)

        print_result(console, exhausted())

        text = console.export_text()
        assert "Request failed after 2 attempt(s)" in text
        assert "timeout" in text

    def test_print_text_body_verbatim(self):
        """Text bodies are printed without markup interpretation."""
        console = Console(record=True, width=200)

        print_result(console, Success(status=200, body="[bold]raw[/bold]", attempts_made=1))

        assert "[bold]raw[/bold]" in console.export_text()
