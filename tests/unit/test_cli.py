"""Unit tests for the command-line interface."""

import httpx
import pytest
from click.testing import CliRunner

from actionfetch import __version__
from actionfetch.cli import main
from actionfetch.cli.main import cli
from actionfetch.core.config import reload_config
from actionfetch.executor.request_executor import RequestExecutor


async def no_sleep(seconds):
    return None


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Clean INPUT_* environment with a step output file."""
    for name in (
        "INPUT_URL",
        "INPUT_METHOD",
        "INPUT_HEADERS",
        "INPUT_BODY",
        "INPUT_AUTHORIZATION",
        "INPUT_TIMEOUT_MS",
        "INPUT_MAX_RETRIES",
        "INPUT_BACKOFF_BASE_MS",
        "INPUT_FAIL_ON_ERROR_STATUS",
    ):
        monkeypatch.delenv(name, raising=False)
    output_file = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
    reload_config()
    yield monkeypatch, output_file
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    reload_config()


@pytest.fixture
def serve(monkeypatch):
    """Route CLI requests to a mock transport handler."""
    calls = []

    def _serve(handler):
        def recording(request):
            calls.append(request)
            return handler(request)

        monkeypatch.setattr(
            main,
            "RequestExecutor",
            lambda: RequestExecutor(transport=httpx.MockTransport(recording), sleep=no_sleep),
        )
        return calls

    return _serve


class TestCallCommand:
    """Test the call command."""

    def test_success(self, runner, env, serve):
        """A 2xx response exits 0."""
        serve(lambda request: httpx.Response(200, json={"id": 1}))

        result = runner.invoke(cli, ["call", "https://api.example.com/items"])

        assert result.exit_code == 0
        assert "HTTP 200" in result.output

    def test_error_status_fails(self, runner, env, serve):
        """A non-2xx response exits 1 by default."""
        calls = serve(lambda request: httpx.Response(503, text="unavailable"))

        result = runner.invoke(cli, ["call", "https://api.example.com/items", "--max-retries", "3"])

        assert result.exit_code == 1
        assert "HTTP 503" in result.output
        assert len(calls) == 1

    def test_allow_error_status(self, runner, env, serve):
        """--allow-error-status exits 0 for non-2xx responses."""
        serve(lambda request: httpx.Response(404, text="missing"))

        result = runner.invoke(
            cli, ["call", "https://api.example.com/items", "--allow-error-status"]
        )

        assert result.exit_code == 0

    def test_method_headers_and_body(self, runner, env, serve):
        """Flags shape the outgoing request."""
        calls = serve(lambda request: httpx.Response(201))

        result = runner.invoke(
            cli,
            [
                "call",
                "https://api.example.com/items",
                "-X",
                "post",
                "-H",
                "Content-Type: application/json",
                "-d",
                '{"name": "widget"}',
            ],
        )

        assert result.exit_code == 0
        assert calls[0].method == "POST"
        assert calls[0].headers["content-type"] == "application/json"
        assert calls[0].content == b'{"name": "widget"}'

    def test_exhausted(self, runner, env, serve):
        """Exhausted retries exit 1."""

        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        calls = serve(refuse)

        result = runner.invoke(
            cli, ["call", "https://api.example.com/items", "--max-retries", "1"]
        )

        assert result.exit_code == 1
        assert "failed after 2 attempt(s)" in result.output
        assert len(calls) == 2

    def test_relative_url(self, runner, env, serve):
        """A relative URL is a configuration error with no request made."""
        calls = serve(lambda request: httpx.Response(200))

        result = runner.invoke(cli, ["call", "api.example.com"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        assert calls == []

    def test_malformed_header(self, runner, env, serve):
        """A header without a colon is a configuration error."""
        serve(lambda request: httpx.Response(200))

        result = runner.invoke(cli, ["call", "https://example.com", "-H", "broken"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_negative_retries(self, runner, env, serve):
        """Invalid retry counts are configuration errors."""
        serve(lambda request: httpx.Response(200))

        result = runner.invoke(cli, ["call", "https://example.com", "--max-retries", "-1"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestRunAndValidateCommands:
    """Test YAML-driven commands."""

    def test_run(self, runner, env, serve, tmp_path):
        """run executes a YAML request definition."""
        calls = serve(lambda request: httpx.Response(200, text="ok"))
        path = tmp_path / "request.yaml"
        path.write_text("request:\n  url: https://example.com/ping\n  method: delete\n")

        result = runner.invoke(cli, ["run", str(path)])

        assert result.exit_code == 0
        assert calls[0].method == "DELETE"

    def test_run_invalid_definition(self, runner, env, tmp_path):
        """run rejects invalid definitions."""
        path = tmp_path / "request.yaml"
        path.write_text("retry:\n  max_retries: 1\n")

        result = runner.invoke(cli, ["run", str(path)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_validate(self, runner, env, tmp_path):
        """validate reports a valid definition."""
        path = tmp_path / "request.yaml"
        path.write_text(
            "request:\n  url: https://example.com\nretry:\n  max_retries: 2\n  backoff_base_ms: 100\n"
        )

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 0
        assert "Request is valid" in result.output
        assert "Attempts: 3" in result.output

    def test_validate_invalid(self, runner, env, tmp_path):
        """validate exits 1 on invalid definitions."""
        path = tmp_path / "request.yaml"
        path.write_text("request: {}\nretry:\n  max_retries: -5\n")

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 1
        assert "invalid" in result.output


class TestEnvCommand:
    """Test the GitHub Actions entrypoint."""

    def test_env_writes_outputs(self, runner, env, serve):
        """INPUT_* variables drive the request and outputs are written."""
        monkeypatch, output_file = env
        monkeypatch.setenv("INPUT_URL", "https://api.example.com/items")
        monkeypatch.setenv("INPUT_AUTHORIZATION", "token abc")
        reload_config()
        calls = serve(lambda request: httpx.Response(200, json={"items": [1, 2]}))

        result = runner.invoke(cli, ["env"])

        assert result.exit_code == 0
        assert calls[0].headers["authorization"] == "token abc"

        written = output_file.read_text()
        assert "outcome=success\n" in written
        assert "status=200\n" in written
        assert "attempts=1\n" in written
        assert "body<<ghadelimiter_" in written
        assert '"items"' in written

    def test_env_missing_url(self, runner, env, serve):
        """A missing INPUT_URL fails before any request."""
        calls = serve(lambda request: httpx.Response(200))

        result = runner.invoke(cli, ["env"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        assert calls == []

    def test_env_error_status_allowed(self, runner, env, serve):
        """INPUT_FAIL_ON_ERROR_STATUS=false keeps non-2xx green."""
        monkeypatch, _ = env
        monkeypatch.setenv("INPUT_URL", "https://api.example.com/items")
        monkeypatch.setenv("INPUT_FAIL_ON_ERROR_STATUS", "false")
        reload_config()
        serve(lambda request: httpx.Response(500, text="oops"))

        result = runner.invoke(cli, ["env"])

        assert result.exit_code == 0


class TestVersionCommand:
    """Test the version command."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output
