"""
Translate pydantic validation errors into field problems.

Field names are the dotted error location (``title``, ``tags.0``). Known
error types get a fixed sentence; custom errors keep their own message.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from linkshelf.exceptions import ValidationProblem

ModelT = TypeVar("ModelT", bound=BaseModel)

REQUIRED = "The {field} field is required."

MESSAGES = {
    "missing": REQUIRED,
    "blank": REQUIRED,
    "string_type": "The {field} must be a string.",
    "int_type": "The {field} must be an integer.",
    "int_parsing": "The {field} must be an integer.",
    "int_from_float": "The {field} must be an integer.",
    "list_type": "The {field} must be an array.",
    "too_long": "The {field} must not have more than {max_length} items.",
    "too_short": "The {field} must have at least {min_length} items.",
    "string_too_long": "The {field} must not be greater than {max_length} characters.",
    "string_too_short": "The {field} must be at least {min_length} characters.",
    "string_pattern_mismatch": "The {field} format is invalid.",
    "email_invalid": "The {field} must be a valid email address.",
    "url_invalid": "The {field} must be a valid URL.",
    # Ids outside the column range cannot reference a row.
    "greater_than_equal": "The selected {field} is invalid.",
    "less_than_equal": "The selected {field} is invalid.",
}


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "body"


def error_message(error: dict) -> str:
    field = _field_name(error.get("loc", ()))
    error_type = error.get("type")
    ctx = error.get("ctx") or {}

    # An empty list fails "required" before it fails a minimum size.
    if error_type == "too_short" and ctx.get("actual_length") == 0:
        return REQUIRED.format(field=field)

    template = MESSAGES.get(error_type)
    if template is None:
        return error["msg"]
    return template.format(field=field, **ctx)


def problems_from_error(exc: ValidationError) -> dict[str, list[str]]:
    problems: dict[str, list[str]] = {}
    for error in exc.errors():
        field = _field_name(error.get("loc", ()))
        message = error_message(error)
        if message not in problems.setdefault(field, []):
            problems[field].append(message)
    return problems


def validate_payload(model: type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` against ``model`` or raise ``ValidationProblem``."""
    if not isinstance(data, dict):
        raise ValidationProblem.single("body", "The request body must be a JSON object.")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationProblem(problems_from_error(e)) from None
