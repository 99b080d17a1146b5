"""Error taxonomy and the handlers that turn it into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .core import get_settings

logger = logging.getLogger(__name__)


class CRMError(Exception):
    """Base class for errors reported to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code, content={"detail": self.message}
        )


class ValidationError(CRMError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request data"


class NotFoundError(CRMError):
    """The requested id has no matching row."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class AuthenticationError(CRMError):
    """No session, or the session could not be verified."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content={"detail": self.message, "login_url": get_settings().LOGIN_URL},
            headers={"WWW-Authenticate": "Bearer"},
        )


class TransportError(CRMError):
    """The email collaborator did not accept the message."""

    message = "Failed to send email"


class StoreError(CRMError):
    """Unexpected persistence failure."""

    message = "Database operation failed"


async def crm_error_handler(request: Request, exc: CRMError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return exc.to_response()


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report schema violations as 400 with the offending locations."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": ValidationError.message, "errors": errors},
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(
        "Store failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return StoreError().to_response()


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on ``app``."""
    app.add_exception_handler(CRMError, crm_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
