"""
Application error taxonomy.

Every error the service reports on purpose is an ``AppError``. The HTTP layer
renders them as problem objects (``type``, ``title``, ``status``, ``detail``)
with the status code carried by the class.
"""

from fastapi import status

MULTIPLE_PROBLEMS_DETAIL = "There were multiple problems on field that have occurred."


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    title: str = "Internal Server Error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def headers(self) -> dict[str, str] | None:
        return None

    def to_problem(self) -> dict:
        return {
            "type": "about:blank",
            "title": self.title,
            "status": self.status_code,
            "detail": self.detail,
        }


class NotFoundError(AppError):
    """Lookup by natural key (slug, hash, username) found nothing."""

    status_code = status.HTTP_404_NOT_FOUND
    title = "Not Found"


class ForbiddenError(AppError):
    """The authorization layer denied the action; detail is the deny reason."""

    status_code = status.HTTP_403_FORBIDDEN
    title = "Forbidden"


class ConflictError(AppError):
    """A business rule rejected an otherwise valid request."""

    status_code = status.HTTP_400_BAD_REQUEST
    title = "Bad Request"


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Unauthorized"

    def __init__(self, detail: str = "Unauthenticated."):
        super().__init__(detail)

    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": "Bearer"}


class RateLimitedError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    title = "Too Many Requests"

    def __init__(self, retry_after: int):
        super().__init__(
            f"You have exceeded the rate limit. Please try again in {retry_after} seconds."
        )
        self.retry_after = retry_after

    def headers(self) -> dict[str, str] | None:
        return {"Retry-After": str(self.retry_after)}


class ValidationProblem(AppError):
    """
    Input failed one or more rules.

    ``problems`` maps a field name (``tags``, ``tags.0``, ...) to its messages.
    A single message on a single field is reported as the detail alone;
    anything more is reported with the full map.
    """

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    title = "Unprocessable Entity"

    def __init__(self, problems: dict[str, list[str]]):
        self.problems = {field: list(msgs) for field, msgs in problems.items() if msgs}
        if self.is_single():
            detail = next(iter(self.problems.values()))[0]
        else:
            detail = MULTIPLE_PROBLEMS_DETAIL
        super().__init__(detail)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationProblem":
        return cls({field: [message]})

    def is_single(self) -> bool:
        return len(self.problems) == 1 and len(next(iter(self.problems.values()))) == 1

    def to_problem(self) -> dict:
        problem = super().to_problem()
        if not self.is_single():
            problem["problems"] = self.problems
        return problem
