"""
Module 09D - API Error Handling

Standardized error handling for the API.

Core ProofTraceExceptions that reach a route are mapped to an HTTP status by
their error code; everything else unexpected becomes INTERNAL_ERROR.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, ProofTraceException

logger = logging.getLogger(__name__)


# HTTP status per core error code; unlisted codes map to 500
STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.CANONICALIZATION_ERROR: 400,
    ErrorCodes.NOT_AN_OBJECT: 400,
    ErrorCodes.INVALID_HASH: 400,
    ErrorCodes.MISSING_INPUT: 400,
    ErrorCodes.EMPTY_BATCH: 400,
    ErrorCodes.HASH_MISMATCH: 400,
    ErrorCodes.INVALID_ROOT: 400,
    ErrorCodes.NOT_BATCHED: 404,
    ErrorCodes.NOT_ANCHORED: 404,
    ErrorCodes.ALREADY_ANCHORED: 409,
    ErrorCodes.CHAIN_UNREACHABLE: 503,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, code: str = "INVALID_REQUEST", details: dict[str, Any] | None = None):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details,
        )


class NotFoundError(APIError):
    """Requested object does not exist."""

    def __init__(self, message: str, code: str = "NOT_FOUND", details: dict[str, Any] | None = None):
        super().__init__(
            code=code,
            message=message,
            status_code=404,
            details=details,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def prooftrace_error_handler(request: Request, exc: ProofTraceException) -> JSONResponse:
    """Handle core exceptions that escape a route."""
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: [{exc.code}] {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
