"""
Error responses.

Domain errors, ``ValueError`` and request validation failures are turned
into ``ErrorResponse`` bodies by exception handlers registered on the app.
``ErrorHandlerMiddleware`` catches whatever escapes them and answers 500.

Every body carries ``error_code`` (the exception's code), ``message``,
``hint``, ``detail`` and ``path``.
"""

import traceback
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    AllocationError,
    ConfigurationError,
    ConflictError,
    InvalidQuantityError,
    InvoiceTypeInvalidError,
    LedgerlineError,
    NotFoundError,
    SequenceAllocationFailedError,
    StockError,
    StockRestoreFailedError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)

# Checked in order, so subclasses precede their bases.
ERROR_STATUS: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (StockRestoreFailedError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (InvalidQuantityError, status.HTTP_400_BAD_REQUEST),
    (InvoiceTypeInvalidError, 422),
    (StockError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (AllocationError, status.HTTP_409_CONFLICT),
    (SequenceAllocationFailedError, 422),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ValueError, status.HTTP_400_BAD_REQUEST),
)

HINTS: dict[str, str] = {
    "TENANT_REQUIRED": "Send the tenant id in the X-Tenant-ID header.",
    "TENANT_NOT_FOUND": "Register the tenant with POST /api/tenants and send its id in the tenant header.",
    "PARTY_NOT_FOUND": "Check the party ID for this tenant.",
    "ITEM_NOT_FOUND": "Check the item ID and try GET /api/items to list items.",
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /api/invoices to list invoices.",
    "PAYMENT_NOT_FOUND": "Check the payment ID and try GET /api/payments to list payments.",
    "ADJUSTMENT_NOT_FOUND": "Check the adjustment ID and try GET /api/adjustments to list adjustments.",
    "INVOICE_CONFLICT": "The invoice changed while this request ran. Fetch it again and retry.",
    "INSUFFICIENT_STOCK": "Reduce the quantity or record a purchase first.",
    "INVALID_QUANTITY": "Quantities must be finite numbers greater than zero.",
    "INVOICE_TYPE_INVALID": "Invoices must be SALES or PURCHASE.",
    "ALLOCATION_EXCEEDS_DUE": "Fetch the invoice's current due amount and allocate at most that.",
    "ALLOCATION_EXCEEDS_PAYMENT_AMOUNT": "Allocations must add up to no more than the payment amount.",
    "ALLOCATION_INVOICE_MISMATCH": "Allocate receipts to the party's sales invoices and payments to its purchase invoices.",
    "SEQUENCE_ALLOCATION_FAILED": "Check the tenant header; numbers are only issued to registered tenants.",
    "STOCK_RESTORE_FAILED": "The invoice could not be restored after a failed update. Reconcile stock manually.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    405: "Check the HTTP method for this endpoint.",
    409: "The request conflicts with the current state. Reload and retry.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}

HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
}


def status_for(exc: Exception) -> int:
    for exc_type, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: Any = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINTS.get(error_code) or STATUS_HINTS.get(status_code, ""),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _log(request: Request, status_code: int, error_code: str, message: str) -> None:
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        status=status_code,
        error_code=error_code,
        error=message,
    )


async def ledgerline_error_handler(request: Request, exc: LedgerlineError) -> JSONResponse:
    status_code = status_for(exc)
    _log(request, status_code, exc.code, exc.message)
    return error_response(request, status_code, exc.code, exc.message, exc.details or None)


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    _log(request, status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", str(exc))
    return error_response(request, status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", str(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [
        f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return error_response(
        request,
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        "; ".join(problems),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error_code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(request, exc.status_code, error_code, str(exc.detail or "An error occurred"))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last-resort handler: unexpected exceptions become a 500 body."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            if isinstance(exc, LedgerlineError):
                return await ledgerline_error_handler(request, exc)
            logger.error(
                "unhandled_exception",
                request_id=getattr(request.state, "request_id", None),
                path=request.url.path,
                error_type=type(exc).__name__,
                error=str(exc),
                traceback=traceback.format_exc(),
            )
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An unexpected error occurred",
            )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerlineError, ledgerline_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
