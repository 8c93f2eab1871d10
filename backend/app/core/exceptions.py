"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from typing import Any, Dict

logger = logging.getLogger("storefront.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None, message: str = None):
        if message is None:
            message = f"{resource} not found"
            if resource_id is not None:
                message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class DuplicateAccountCodeError(AppException):
    """Raised when an account code is already taken."""

    def __init__(self, code: str):
        super().__init__(
            message="Account code already exists",
            error_code="ERR_ACCOUNT_DUPLICATE_CODE",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"code": code}
        )


class InvalidAccountError(AppException):
    """Raised for account changes that break the chart's structure."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_ACCOUNT_INVALID",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class UnbalancedEntryError(AppException):
    """Raised when journal debits and credits do not match."""

    def __init__(self, total_debit, total_credit, message: str = "Debits must equal credits"):
        super().__init__(
            message=message,
            error_code="ERR_JOURNAL_UNBALANCED",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"total_debit": str(total_debit), "total_credit": str(total_credit)}
        )


class InvalidEntryError(AppException):
    """Raised for journal entries that fail domain validation."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_JOURNAL_INVALID",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class EntryAlreadyPostedError(AppException):
    """Raised when posting a journal entry that has already been posted."""

    def __init__(self, entry_id: int):
        super().__init__(
            message="Entry already posted",
            error_code="ERR_JOURNAL_ALREADY_POSTED",
            status_code=status.HTTP_409_CONFLICT,
            details={"id": entry_id}
        )


class PostingFailedError(AppException):
    """Raised when a posting was rolled back part-way through."""

    def __init__(self, entry_id: int, reason: str):
        super().__init__(
            message="Posting failed and was rolled back",
            error_code="ERR_POSTING_FAILED",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"id": entry_id, "reason": reason}
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for HTTP errors (including unknown routes) with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        404: "ERR_NOT_FOUND",
        405: "ERR_METHOD_NOT_ALLOWED",
        409: "ERR_CONFLICT",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": exc.detail,
            "details": {}
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": [
                    {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
                    for err in exc.errors()
                ]
            }
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method}
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
