"""
Request body dependencies.

Bodies are read as raw JSON and validated by our own models so that every
failure is reported in the same problem format.
"""

import json
from typing import Any

from fastapi import Request

from linkshelf.exceptions import ValidationProblem
from linkshelf.utils.validation import validate_payload


async def json_body(request: Request) -> Any:
    """Decoded JSON body, or an empty object when the body is empty."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationProblem.single("body", "The request body must be valid JSON.") from None


def parse_body(model):
    """Dependency factory returning the body validated against ``model``."""

    async def dependency(request: Request):
        return validate_payload(model, await json_body(request))

    dependency.__name__ = f"parse_{model.__name__}"
    return dependency
