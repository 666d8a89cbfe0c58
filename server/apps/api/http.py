"""Helpers for reading JSON request bodies."""

import json
from typing import Any

from django.core.exceptions import ValidationError
from django.http import HttpRequest


def parse_json_body(request: HttpRequest) -> dict[str, Any]:
    """Decode the request body as a JSON object.

    An empty body is treated as an empty object.

    Args:
        request: Incoming request.

    Returns:
        Decoded JSON object.

    Raises:
        ValidationError: If the body is not a JSON object.
    """
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise ValidationError('Request body must be valid JSON') from error

    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload
