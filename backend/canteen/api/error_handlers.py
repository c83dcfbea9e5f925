"""Error Handlers — map every failure to the {"error": {...}} envelope.

Invariants:
    - CanteenError subclasses answer with their own http_status and to_response()
    - Pydantic request errors become RequestValidationFailed (400); the message is
      the first failing field, all failures listed under details.fields
    - Anything else is a 500 INTERNAL_ERROR with no exception text in the body
    - 4xx logged at warning, 5xx at error
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from canteen.core.errors import (
    CanteenError, ErrorCategory, ErrorSeverity, RequestValidationFailed,
)

logger = logging.getLogger(__name__)


def _respond(request: Request, exc: CanteenError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def validation_failure(exc: RequestValidationError) -> RequestValidationFailed:
    fields = [
        {
            # loc[0] is the request part: body, query or path
            "field": ".".join(str(p) for p in e["loc"][1:]),
            "message": e["msg"].removeprefix("Value error, "),
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    if not fields:
        return RequestValidationFailed("Invalid request data")
    first = fields[0]
    message = first["message"]
    if first["field"]:
        message = f"{first['field']}: {message}"
    return RequestValidationFailed(
        message, field=first["field"] or None, details={"fields": fields},
    )


async def canteen_error_handler(request: Request, exc: CanteenError):
    return _respond(request, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _respond(request, validation_failure(exc))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    internal = CanteenError(
        "An unexpected error occurred", "INTERNAL_ERROR",
        ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, http_status=500,
    )
    return JSONResponse(status_code=500, content=internal.to_response())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CanteenError, canteen_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
