"""Error Handlers — global exception handlers rendering TwoFaceError envelopes.

Invariants:
    - Every error response is {"error": "<Cause>: <text>"} with the Cause's status
    - TwoFaceError.internal is logged, never serialized
    - RequestValidationError → UserInvalidField (400)
    - Framework HTTP errors mapped onto the closed Cause taxonomy
    - Exception (catch-all) → ServerError / "Internal server error"

Design Decisions:
    - Four-layer handler: domain (TwoFaceError), validation (Pydantic),
      HTTP (Starlette), catch-all (Exception); all funnel through _render()
    - Extracted from main.py to keep the app factory small
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quietbackend.core.errors import Cause, ExternalError, TwoFaceError

logger = logging.getLogger(__name__)

_CAUSE_BY_STATUS: dict[int, Cause] = {
    401: Cause.USER_BAD_AUTH,
    404: Cause.NOT_FOUND,
    409: Cause.USER_CONFLICT,
}

_TEXT_BY_CAUSE: dict[Cause, str] = {
    Cause.USER_BAD_AUTH: "Unauthorized",
    Cause.NOT_FOUND: "Resource not found",
    Cause.USER_CONFLICT: "Conflict",
    Cause.USER_ACTION_INVALID: "Invalid request",
}


def cause_for_status(status_code: int) -> Cause:
    """Classify a framework-level HTTP status into the Cause taxonomy."""
    if status_code >= 500:
        return Cause.SERVER_ERROR
    return _CAUSE_BY_STATUS.get(status_code, Cause.USER_ACTION_INVALID)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_two_face_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _render(
    request: Request, exc: TwoFaceError, exc_info: BaseException | None = None,
) -> JSONResponse:
    """Log the internal half once, return only the external half."""
    log = logger.error if exc.cause is Cause.SERVER_ERROR else logger.warning
    log(
        f"{exc.external} (internal: {exc.internal!r})",
        exc_info=exc_info,
        extra={
            "cause": exc.cause.value,
            "status": exc.http_status,
            "path": request.url.path,
        },
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(),
    )


def _register_two_face_error_handler(app: FastAPI) -> None:
    @app.exception_handler(TwoFaceError)
    async def two_face_error_handler(request: Request, exc: TwoFaceError):
        """Handle all described domain/infrastructure errors."""
        return _render(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        error = TwoFaceError(
            internal=exc.errors(),
            external=ExternalError(Cause.USER_INVALID_FIELD, "Invalid request data"),
        )
        return _render(request, error)


def _register_http_error_handler(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Handle routing errors (unknown path, wrong method) and HTTPException."""
        cause = cause_for_status(exc.status_code)
        if cause is Cause.SERVER_ERROR:
            external = ExternalError()
        else:
            external = ExternalError(cause, _TEXT_BY_CAUSE[cause])
        return _render(request, TwoFaceError(internal=exc.detail, external=external))


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        return _render(request, TwoFaceError.from_exception(exc), exc_info=exc)
