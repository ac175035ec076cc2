"""
Error taxonomy of the e-book workflows and the FastAPI handlers that turn it
into HTTP responses.

Services raise the :class:`EbookError` subclasses below; they never build
HTTP responses themselves.
"""

import logging
from typing import Any, Dict, Optional

import pydantic
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EbookError(Exception):
    """Base class for errors raised by the e-book workflows."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.details}


class Unauthenticated(EbookError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidArgument(EbookError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required field"


class UnsupportedType(EbookError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Only PDF or EPUB files can be uploaded"


class PayloadTooLarge(EbookError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "File size exceeds the allowed maximum"


class Forbidden(EbookError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(EbookError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "File does not exist in storage"


class StorageError(EbookError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Metadata update failed"


async def handle_ebook_errors(request: Request, exc: EbookError) -> JSONResponse:
    """Translate a workflow error into its JSON response."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors, reported as 400."""
    errors = [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "detail": errors},
    )


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Validation errors raised outside request parsing are server bugs."""
    logger.error(f"Response validation failed for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates during the request."""
    try:
        return await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
