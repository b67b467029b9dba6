from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger("expense_svc.errors")


# Domain exceptions ------------------------------------------------


class ExpenseServiceError(Exception):
    """Base for failures resolved at the service boundary.

    Each subclass carries the HTTP status and error code the transport layer
    reports; `detail` is the only text that reaches the client.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class AuthenticationError(ExpenseServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class ExpenseValidationError(ExpenseServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class ExpenseNotFoundError(ExpenseServiceError):
    # Unknown and not-owned ids are reported identically.
    status_code = status.HTTP_400_BAD_REQUEST
    code = "not_found"


class StoreUnavailableError(ExpenseServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "store_unavailable"


# Handlers ---------------------------------------------------------


def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = f"No route for {request.method} {request.url.path}"
        code = "not_found"
    else:
        detail = exc.detail
        code = "http_error"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": code, "detail": detail},
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    # Malformed bodies and query params (unknown category, bad date, missing id)
    # are client input errors.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "validation_error",
            "detail": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                for e in exc.errors()
            ],
        },
    )


def service_error_handler(request: Request, exc: ExpenseServiceError):  # type: ignore
    if exc.status_code >= 500:
        logger.error("service failure: %s", exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.detail},
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
