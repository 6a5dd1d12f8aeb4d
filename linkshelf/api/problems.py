"""
Exception handlers rendering every failure as a problem object.
"""

import errno
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from linkshelf.config import settings
from linkshelf.exceptions import AppError, ValidationProblem
from linkshelf.utils.logger import setup_logger
from linkshelf.utils.validation import error_message

logger = setup_logger("problems")

PROBLEM_MEDIA_TYPE = "application/problem+json"
REQUEST_SOURCES = ("body", "query", "path", "header", "cookie")


def problem_response(exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_problem(),
        headers=exc.headers(),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def problem_from_request_errors(errors) -> ValidationProblem:
    """Problems for FastAPI's own parameter validation (query, path, form)."""
    problems: dict[str, list[str]] = {}
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if loc and loc[0] in REQUEST_SOURCES:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        message = error_message({**error, "loc": loc})
        problems.setdefault(field, []).append(message)
    return ValidationProblem(problems)


def register_problem_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
        else:
            logger.debug(
                f"{exc.status_code} {type(exc).__name__} on {request.url.path}: {exc.detail}"
            )
        return problem_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return problem_response(problem_from_request_errors(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        try:
            title = HTTPStatus(exc.status_code).phrase
        except ValueError:
            title = "Error"
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "type": "about:blank",
                "title": title,
                "status": exc.status_code,
                "detail": exc.detail,
            },
            headers=getattr(exc, "headers", None),
            media_type=PROBLEM_MEDIA_TYPE,
        )

    @app.exception_handler(OSError)
    async def oserror_exception_handler(request: Request, exc: OSError):
        logger.error(f"OSError caught: {exc}, errno: {exc.errno}")
        if exc.errno in (errno.ETIMEDOUT, errno.ECONNREFUSED):
            logger.error(
                f"Returning 503 due to DB connection issue: {settings.db_unavailable_hint}"
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"detail": settings.db_unavailable_hint},
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Server Error"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Server Error"},
        )
