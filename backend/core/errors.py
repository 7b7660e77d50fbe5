# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Application error taxonomy and the FastAPI handlers that translate it.

Every failure leaves the service in the same envelope::

    {"success": false, "kind": "<machine-readable>", "message": "<for humans>"}

Handlers raise the classes below; nothing else needs to know about status
codes.  Internal detail (stack traces, SQL) is logged, never returned.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from core.logger import logger


class HotelError(Exception):
    """Base class.  Subclasses pin ``status_code``, ``kind`` and a default message."""

    status_code = status.HTTP_400_BAD_REQUEST
    kind = "error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(HotelError):
    # Same text for "no such email" and "wrong password"
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "invalid_credentials"
    default_message = "Invalid email or password"


class AccountDisabled(HotelError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "account_disabled"
    default_message = "Your account has been disabled. Please contact an administrator"


class InvalidToken(HotelError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "invalid_token"
    default_message = "Invalid or expired refresh token"


class Unauthorized(HotelError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthorized"
    default_message = "Please log in"


class Forbidden(HotelError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"
    default_message = "You do not have permission to access this resource"


class Conflict(HotelError):
    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"
    default_message = "Resource already exists"


class NotFound(HotelError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"
    default_message = "Not found"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def _envelope(status_code: int, kind: str, message: str, details=None) -> JSONResponse:
    body = {"success": False, "kind": kind, "message": message}
    if details is not None:
        body["details"] = details
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


async def _hotel_error_handler(request: Request, exc: HotelError) -> JSONResponse:
    return _envelope(exc.status_code, exc.kind, exc.message)


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    # Framework-raised errors (unknown route, wrong method …)
    kind = {
        status.HTTP_401_UNAUTHORIZED: Unauthorized.kind,
        status.HTTP_403_FORBIDDEN: Forbidden.kind,
        status.HTTP_404_NOT_FOUND: NotFound.kind,
        status.HTTP_409_CONFLICT: Conflict.kind,
    }.get(exc.status_code, "http_error")
    return _envelope(exc.status_code, kind, str(exc.detail))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0]["msg"] if errors else "Invalid request"
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in errors
    ]
    return _envelope(422, "validation_error", first, details)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HotelError, _hotel_error_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
