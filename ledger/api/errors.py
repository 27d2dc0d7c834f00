"""
HTTP Error Mapping

Maps each error kind to a status code and a minimal body:
- ValidationError  -> 400 {"message", "errors": [{"field", "message"}]}
- Unauthorized     -> 401 {"message"} plus WWW-Authenticate: Bearer
- NotFound         -> 404 {"message"}
- Conflict         -> 409 {"message"}
- Internal / other -> 500 {"message": "Internal server error"}

Nothing here ever puts a stack trace or exception text in a response.
"""

from typing import Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from ledger.errors import FieldError, Internal, LedgerError, Unauthorized, ValidationError


IGNORED_LOC_PARTS = {"body", "query", "path", "header"}


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if str(part) not in IGNORED_LOC_PARTS]
    return ".".join(parts) or "request"


def validation_error_from_pydantic(
    exc: Union[RequestValidationError, PydanticValidationError],
) -> ValidationError:
    """Convert pydantic/FastAPI validation errors to per-field messages."""
    errors = [
        FieldError(_field_name(tuple(error.get("loc", ()))), error.get("msg", "Invalid value"))
        for error in exc.errors()
    ]
    return ValidationError(errors)


def _error_body(error: LedgerError) -> dict:
    body = {"message": error.message}
    if isinstance(error, ValidationError):
        body["errors"] = error.errors
    return body


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on an app."""

    @app.exception_handler(LedgerError)
    async def handle_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
        headers = None
        if isinstance(exc, Unauthorized):
            headers = {"WWW-Authenticate": "Bearer"}
        if isinstance(exc, Internal):
            exc = Internal()
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = validation_error_from_pydantic(exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(error),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        components = getattr(request.app.state, "components", None)
        if components is not None:
            await components.event_logger.log_error(
                error_type=type(exc).__name__,
                error_message=str(exc),
                details={"path": request.url.path, "method": request.method},
            )
        error = Internal()
        return JSONResponse(
            status_code=error.status_code,
            content=_error_body(error),
        )
