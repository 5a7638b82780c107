"""
Exception handlers

Every failure leaves the API in one envelope:

    {
        "error": {
            "status_code": 404,
            "error_code": "RESOURCE_BLOCK_NOT_FOUND",
            "message": "Block with id '12' not found",
            "type": "Not Found",
            "details": {"resource_type": "Block", "resource_id": 12},
            "path": "/api/v1/blocks/12"
        }
    }

The listing endpoint is the one exception: a missing content type answers
``{"error": "<message>"}`` directly from its route.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sitewidgets.exceptions import ErrorCode, SiteWidgetsError

logger = logging.getLogger(__name__)

# status -> (reason phrase, error code used when the raiser gave none)
STATUS_INFO: dict[int, tuple[str, ErrorCode]] = {
    400: ("Bad Request", ErrorCode.VALIDATION_FAILED),
    401: ("Unauthorized", ErrorCode.AUTH_FAILED),
    403: ("Forbidden", ErrorCode.AUTH_PERMISSION_DENIED),
    404: ("Not Found", ErrorCode.RESOURCE_NOT_FOUND),
    409: ("Conflict", ErrorCode.VALIDATION_DUPLICATE_RESOURCE),
    413: ("Payload Too Large", ErrorCode.VALIDATION_FAILED),
    422: ("Validation Error", ErrorCode.VALIDATION_FAILED),
    500: ("Internal Server Error", ErrorCode.INTERNAL_ERROR),
    503: ("Service Unavailable", ErrorCode.SERVICE_UNAVAILABLE),
}


def error_body(
    request: Request,
    status_code: int,
    message: str,
    error_code: ErrorCode | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    reason, default_code = STATUS_INFO.get(status_code, ("Error", ErrorCode.UNKNOWN_ERROR))
    error: dict[str, Any] = {
        "status_code": status_code,
        "error_code": (error_code or default_code).value,
        "message": message,
        "type": reason,
        "path": request.url.path,
    }
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


async def handle_app_error(request: Request, exc: SiteWidgetsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}", extra={"status_code": exc.status_code})
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}", extra={"status_code": exc.status_code})
    return error_body(request, exc.status_code, exc.message, exc.error_code, exc.details)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}", extra={"status_code": exc.status_code})
    return error_body(request, exc.status_code, str(exc.detail))


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(f"Rejected request to {request.url.path}: {len(problems)} invalid field(s)")
    return error_body(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        ErrorCode.VALIDATION_FAILED,
        {"validation_errors": problems},
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    # Internal details stay in the log
    logger.error(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}", exc_info=exc)
    return error_body(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SiteWidgetsError, handle_app_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
