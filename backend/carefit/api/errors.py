"""
Error responses for the JSON API.

Every failure is returned as {"error": message} plus optional "code" and
"details". Store errors are mapped by code; anything unrecognised is a 500.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from carefit.db.errors import (
    FOREIGN_KEY_VIOLATION,
    INSUFFICIENT_PRIVILEGE,
    INVALID_TEXT_REPRESENTATION,
    NOT_NULL_VIOLATION,
    UNIQUE_VIOLATION,
    RecordNotFound,
    StoreError,
)

logger = logging.getLogger(__name__)

# Responses must not be cached: pages read back a just-written value
NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}

STORE_ERROR_STATUS = {
    UNIQUE_VIOLATION: status.HTTP_409_CONFLICT,
    FOREIGN_KEY_VIOLATION: status.HTTP_409_CONFLICT,
    INSUFFICIENT_PRIVILEGE: status.HTTP_403_FORBIDDEN,
    NOT_NULL_VIOLATION: status.HTTP_400_BAD_REQUEST,
    INVALID_TEXT_REPRESENTATION: status.HTTP_400_BAD_REQUEST,
}

STORE_ERROR_MESSAGES = {
    status.HTTP_409_CONFLICT: "Conflicts with an existing record",
    status.HTTP_403_FORBIDDEN: "Permission denied by the database",
    status.HTTP_400_BAD_REQUEST: "Rejected by the database",
}


def status_for_store_error(error: StoreError) -> int:
    return STORE_ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"error": message}
    content.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=content)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]
    error_types = {error.get("type") for error in errors}
    if "json_invalid" in error_types:
        message = "Malformed JSON body"
    elif "missing" in error_types:
        message = "Missing required fields"
    else:
        message = "Invalid request data"

    logger.warning(f"[VALIDATION] {request.method} {request.url.path}: {details}")
    return error_response(status.HTTP_400_BAD_REQUEST, message, details=details)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


async def not_found_handler(request: Request, exc: RecordNotFound) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, f"{exc.resource} not found")


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    status_code = status_for_store_error(exc)
    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            f"[STORE] {request.method} {request.url.path} failed: {exc!r}",
            exc_info=exc,
        )
        message = f"Database operation failed: {exc.message}"
    else:
        logger.warning(f"[STORE] {request.method} {request.url.path}: {exc!r}")
        message = STORE_ERROR_MESSAGES[status_code]
    return error_response(status_code, message, code=exc.code, details=exc.message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Served outside the http middleware, so the cache headers are set here
    logger.error(
        f"[UNHANDLED] {request.method} {request.url.path} failed: {exc!r}",
        exc_info=exc,
    )
    response = error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )
    response.headers.update(NO_STORE_HEADERS)
    return response


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RecordNotFound, not_found_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
