"""Exception handlers mapping errors onto HTTP responses.

Every error body has the same shape::

    {"success": false, "error": {"kind": "...", "code": "...", "message": "..."}}

Only domain errors carry their own message to the client. Anything else is
logged and answered with a generic server error.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bizops.adapter.error import AdapterError
from bizops.domain.error import DomainError, ErrorKind

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
}

SERVER_ERROR_KIND = "server_error"
SERVER_ERROR_MESSAGE = "Something went wrong. Please try again later."


def error_response(
    status_code: int, kind: str, code: str, message: str, **extra
) -> JSONResponse:
    """Build the standard error body."""
    error = {"kind": kind, "code": code, "message": message, **extra}
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map a domain error to its status code."""
    logfire.info(
        "Request rejected",
        path=request.url.path,
        kind=exc.kind.value,
        code=exc.code,
    )
    return error_response(
        STATUS_BY_KIND[exc.kind], exc.kind.value, exc.code, exc.message
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed bodies as bad requests, naming fields but not values."""
    fields = sorted(
        {
            ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            for error in exc.errors()
        }
        - {""}
    )
    logfire.info("Request validation failed", path=request.url.path, fields=fields)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorKind.BAD_REQUEST.value,
        "invalid_request",
        "Invalid request.",
        fields=fields,
    )


async def adapter_error_handler(request: Request, exc: AdapterError) -> JSONResponse:
    """Infrastructure failures are server errors; details stay in the logs."""
    logfire.exception(
        "Infrastructure failure", path=request.url.path, error_type=type(exc).__name__
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        SERVER_ERROR_KIND,
        "internal_error",
        SERVER_ERROR_MESSAGE,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; never leaks the exception to the client."""
    logfire.exception(
        "Unhandled error", path=request.url.path, error_type=type(exc).__name__
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        SERVER_ERROR_KIND,
        "internal_error",
        SERVER_ERROR_MESSAGE,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on ``app``."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AdapterError, adapter_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
