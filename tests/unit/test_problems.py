"""
Validation failures and application errors rendered as problem objects.
"""

import pytest

from linkshelf.exceptions import (
    MULTIPLE_PROBLEMS_DETAIL,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    ValidationProblem,
)
from linkshelf.schemas import LinkPayload, RegisterRequest
from linkshelf.utils.validation import validate_payload


def problem_of(model, data) -> dict:
    with pytest.raises(ValidationProblem) as exc_info:
        validate_payload(model, data)
    return exc_info.value.to_problem()


def test_single_problem_is_the_detail():
    problem = ValidationProblem.single("title", "The title field is required.").to_problem()

    assert problem == {
        "type": "about:blank",
        "title": "Unprocessable Entity",
        "status": 422,
        "detail": "The title field is required.",
    }


def test_two_messages_on_one_field_are_multiple():
    problem = ValidationProblem({"tags.0": ["first", "second"]}).to_problem()

    assert problem["detail"] == MULTIPLE_PROBLEMS_DETAIL
    assert problem["problems"] == {"tags.0": ["first", "second"]}


def test_two_fields_are_multiple():
    problem = ValidationProblem({"title": ["a"], "url": ["b"]}).to_problem()

    assert problem["detail"] == MULTIPLE_PROBLEMS_DETAIL
    assert set(problem["problems"]) == {"title", "url"}


def test_tag_count_messages():
    six = problem_of(
        LinkPayload,
        {"title": "t", "url": "https://a.io", "tags": [1, 2, 3, 4, 5, 6], "visibility": 1},
    )
    none = problem_of(
        LinkPayload, {"title": "t", "url": "https://a.io", "tags": [], "visibility": 1}
    )

    assert six["detail"] == "The tags must not have more than 5 items."
    assert none["detail"] == "The tags field is required."


def test_item_errors_use_dotted_field_names():
    problem = problem_of(
        LinkPayload,
        {"title": "t", "url": "https://a.io", "tags": [1, "x"], "visibility": 1},
    )

    assert problem["detail"] == "The tags.1 must be an integer."


def test_blank_strings_count_as_missing():
    problem = problem_of(
        LinkPayload, {"title": "   ", "url": "https://a.io", "tags": [1], "visibility": 1}
    )

    assert problem["detail"] == "The title field is required."


def test_non_object_body():
    problem = problem_of(LinkPayload, ["not", "an", "object"])

    assert problem["detail"] == "The request body must be a JSON object."


def test_register_username_rules():
    base = {
        "name": "Jane",
        "email": "jane@example.com",
        "password": "secret-password",
        "password_confirmation": "secret-password",
    }

    short = problem_of(RegisterRequest, {**base, "username": "abc"})
    upper = problem_of(RegisterRequest, {**base, "username": "ABCDEF"})

    assert short["detail"] == "The username must be at least 5 characters."
    assert upper["detail"] == (
        "Username only contains lowercase, number, dot and underscore"
    )


def test_register_email_must_be_valid():
    problem = problem_of(
        RegisterRequest,
        {
            "name": "Jane",
            "username": "jane_doe",
            "email": "not-an-email",
            "password": "secret-password",
            "password_confirmation": "secret-password",
        },
    )

    assert problem["detail"] == "The email must be a valid email address."


def test_status_codes_and_headers():
    assert NotFoundError("Link not found").to_problem()["status"] == 404
    assert ConflictError("Cannot add link because already exist.").status_code == 400

    limited = RateLimitedError(42)
    assert limited.status_code == 429
    assert limited.headers() == {"Retry-After": "42"}
    assert limited.detail == (
        "You have exceeded the rate limit. Please try again in 42 seconds."
    )
