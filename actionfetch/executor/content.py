"""Response payload classification."""

import logging
from typing import Any

import httpx

from actionfetch.core.exceptions import ParseError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def is_json(content_type: str) -> bool:
    return JSON_CONTENT_TYPE in content_type.lower()


def parse_payload(response: httpx.Response) -> Any:
    """Decode a response body according to its Content-Type.

    JSON content is parsed into Python structures, anything else is
    returned as text.

    Args:
        response: Fully read HTTP response

    Returns:
        Parsed JSON value or raw text

    Raises:
        ParseError: If the response claims JSON but does not decode
    """
    content_type = response.headers.get("content-type", "")
    if not is_json(content_type):
        return response.text

    try:
        return response.json()
    except ValueError as e:
        logger.debug(f"JSON decode failed for {response.request.url}: {e}")
        raise ParseError(content_type, str(e))
