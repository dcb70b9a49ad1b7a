# nexttogo_service/middleware/error_handler.py

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..user_friendly_errors import describe_error


class UserFriendlyException(Exception):
    """An API error carrying an ``ERROR_MAP`` key and the HTTP status to answer with."""

    def __init__(self, error_key: str, status_code: int = 500, details=None):
        self.error_key = error_key
        self.status_code = status_code
        self.details = details
        super().__init__(describe_error(error_key)["message"])


def _field_path(loc) -> str:
    # Drop the leading "body"/"query" marker; list positions stay numeric.
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts) or "body"


async def user_friendly_exception_handler(request: Request, exc: UserFriendlyException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": describe_error(exc.error_key, exc.details)},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reports which part of a request body (e.g. ``categories.0``) was rejected."""
    problems = [
        {"field": _field_path(error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"error": describe_error("invalid_request", problems)},
    )
