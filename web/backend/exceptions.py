#!/usr/bin/env python3
"""
Error handlers for the web application.

Domain errors come from core.lifecycle.exceptions; this module maps them to
HTTP status codes and the {"success": false, "error", "type"} envelope.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.lifecycle.exceptions import (
    TulenError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
    ValidationError,
    StorageError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    NotFoundError: 404,
    UnauthorizedError: 403,
    ConflictError: 409,
    ValidationError: 422,
    StorageError: 500,
}


def status_code_for(exc: TulenError) -> int:
    for exc_type, status_code in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 500


async def service_exception_handler(
    request: Request,
    exc: TulenError
) -> JSONResponse:
    """
    Handle lifecycle and storage errors.

    Args:
        request: The FastAPI request.
        exc: The domain exception.

    Returns:
        JSONResponse with error details. Storage errors are reported
        generically; their cause is only logged.
    """
    status_code = status_code_for(exc)

    if status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": "Internal server error",
                "type": exc.__class__.__name__
            }
        )

    logger.warning(f"{exc.__class__.__name__} in {request.url.path}: {exc}")

    content = {
        "success": False,
        "error": str(exc),
        "type": exc.__class__.__name__
    }
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors

    return JSONResponse(status_code=status_code, content=content)


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.

    Args:
        request: The FastAPI request.
        exc: The HTTP exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        },
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: The FastAPI request.
        exc: The exception.

    Returns:
        JSONResponse with error details.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
