"""YAML request definition parser."""

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from actionfetch.core.exceptions import ConfigurationError, ValidationError
from actionfetch.core.models import RequestFile


def parse_request_file(request_path: Union[str, Path]) -> RequestFile:
    """Parse request definition from YAML file.

    Args:
        request_path: Path to request YAML file

    Returns:
        Validated RequestFile

    Raises:
        ConfigurationError: If file not found or invalid YAML
        ValidationError: If request definition is invalid

    Example:
        >>> definition = parse_request_file("requests/list_items.yaml")
        >>> print(definition.request.url)
        https://api.example.com/items
    """
    path = Path(request_path)

    # Check file exists
    if not path.exists():
        raise ConfigurationError(f"Request file not found: {path}")

    # Read and parse YAML
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to read {path}: {e}")

    if not isinstance(data, dict):
        raise ValidationError(f"Request file {path} must contain a mapping")

    try:
        return parse_request_from_dict(data)
    except ValidationError as e:
        raise ValidationError(f"Invalid request definition in {path}:\n{e}")


def validate_request_file(request_path: Union[str, Path]) -> bool:
    """Validate request definition without raising exceptions.

    Args:
        request_path: Path to request YAML file

    Returns:
        True if valid, False otherwise
    """
    try:
        parse_request_file(request_path)
        return True
    except (ConfigurationError, ValidationError):
        return False


def parse_request_from_dict(data: Dict[str, Any]) -> RequestFile:
    """Parse request definition from dictionary.

    A ``json`` key under ``request`` is serialized into the body and sets
    ``Content-Type: application/json`` unless a content type is given.

    Args:
        data: Request definition dictionary

    Returns:
        Validated RequestFile

    Raises:
        ValidationError: If request definition is invalid
    """
    request = data.get("request")
    if isinstance(request, dict) and isinstance(request.get("headers"), dict):
        # YAML reads `X-Retries: 3` as an int and `200: x` as an int key
        request = {
            **request,
            "headers": {str(name): str(value) for name, value in request["headers"].items()},
        }
        data = {**data, "request": request}

    if isinstance(request, dict) and "json" in request:
        request = dict(request)
        if request.get("body") is not None:
            raise ValidationError("Request may define either 'body' or 'json', not both")

        request["body"] = json.dumps(request.pop("json"))
        headers = dict(request.get("headers") or {})
        if not any(name.lower() == "content-type" for name in headers):
            headers["Content-Type"] = "application/json"
        request["headers"] = headers
        data = {**data, "request": request}

    try:
        return RequestFile.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid request definition:\n{e}")
