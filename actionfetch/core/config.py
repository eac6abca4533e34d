"""Configuration management for actionfetch.

Step inputs arrive the way GitHub Actions exposes them, as ``INPUT_*``
environment variables. A local ``.env`` file is honored for development.
"""

import json
import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .models import RequestSpec, RetryPolicy

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _getenv(name: str, default: str) -> str:
    """Read a variable, treating blank values as unset.

    The Actions runner exports declared inputs without a value as empty strings.
    """
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value


def _getenv_bool(name: str, default: bool) -> bool:
    raw = _getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in TRUE_VALUES:
        return True
    if raw in FALSE_VALUES:
        return False
    logger.warning(f"Ignoring unrecognized {name}={raw!r}, using {str(default).lower()}")
    return default


class GlobalConfig(BaseModel):
    """Global runtime configuration."""

    # Request inputs
    url: Optional[str] = Field(default_factory=lambda: os.getenv("INPUT_URL"))
    method: str = Field(default_factory=lambda: _getenv("INPUT_METHOD", "GET"))
    headers: Optional[str] = Field(default_factory=lambda: os.getenv("INPUT_HEADERS"))
    body: Optional[str] = Field(default_factory=lambda: os.getenv("INPUT_BODY"))
    authorization: Optional[str] = Field(
        default_factory=lambda: os.getenv("INPUT_AUTHORIZATION")
    )
    timeout_ms: str = Field(
        default_factory=lambda: _getenv("INPUT_TIMEOUT_MS", "30000")
    )

    # Retry inputs
    max_retries: str = Field(default_factory=lambda: _getenv("INPUT_MAX_RETRIES", "3"))
    backoff_base_ms: str = Field(
        default_factory=lambda: _getenv("INPUT_BACKOFF_BASE_MS", "1000")
    )

    # Result handling
    fail_on_error_status: bool = Field(
        default_factory=lambda: _getenv_bool("INPUT_FAIL_ON_ERROR_STATUS", True)
    )
    github_output: Optional[str] = Field(
        default_factory=lambda: os.getenv("GITHUB_OUTPUT")
    )

    # Logging
    log_level: str = Field(
        default_factory=lambda: _getenv("ACTIONFETCH_LOG_LEVEL", "INFO")
    )
    log_format: str = Field(
        default_factory=lambda: _getenv(
            "ACTIONFETCH_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def to_request_spec(self) -> RequestSpec:
        """Build the request described by the inputs.

        Raises:
            ConfigurationError: If an input is malformed
        """
        headers = parse_headers(self.headers)
        if self.authorization:
            headers["Authorization"] = self.authorization

        try:
            return RequestSpec(
                url=(self.url or "").strip(),
                method=self.method,
                headers=headers,
                body=self.body,
                timeout_ms=_parse_int("INPUT_TIMEOUT_MS", self.timeout_ms),
            )
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid request inputs:\n{e}")

    def to_retry_policy(self) -> RetryPolicy:
        """Build the retry policy described by the inputs.

        Raises:
            ConfigurationError: If an input is malformed
        """
        try:
            return RetryPolicy(
                max_retries=_parse_int("INPUT_MAX_RETRIES", self.max_retries),
                backoff_base_ms=_parse_int("INPUT_BACKOFF_BASE_MS", self.backoff_base_ms),
            )
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid retry inputs:\n{e}")


def parse_headers(raw: Optional[str]) -> Dict[str, str]:
    """Parse headers given as a JSON object or ``Name: value`` lines.

    Raises:
        ConfigurationError: If the input is neither form
    """
    if raw is None or not raw.strip():
        return {}

    text = raw.strip()
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Headers are not valid JSON: {e}")
        if not isinstance(data, dict):
            raise ConfigurationError("Headers JSON must be an object")
        return {str(name): str(value) for name, value in data.items()}

    headers: Dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise ConfigurationError(f"Malformed header line: {line!r}")
        headers[name.strip()] = value.strip()
    return headers


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


# Global configuration instance
config = GlobalConfig()


def get_config() -> GlobalConfig:
    """Get global configuration instance."""
    return config


def reload_config() -> GlobalConfig:
    """Reload configuration from environment."""
    load_dotenv(override=True)
    global config
    config = GlobalConfig()
    return config
