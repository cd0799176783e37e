from enum import Enum
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from pydantic import BaseModel

from app.core.logging import get_logger
from app.core.templates import render


class AppError(Exception):
    """Base error carrying an explicit kind and the HTTP status it maps to."""

    kind: str = "app_error"
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, kind: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message: str = message
        if kind is not None:
            self.kind = kind
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    kind = "not_found"
    status_code = HTTP_404_NOT_FOUND


class StoreError(AppError):
    """Any data-access failure. Never retried."""

    kind = "store_error"
    status_code = HTTP_500_INTERNAL_SERVER_ERROR


class FieldErrorKind(str, Enum):
    REQUIRED = "required_field"
    FORMAT = "format"


class FieldError(BaseModel):
    """One rejected form field."""
    field: str
    kind: FieldErrorKind
    message: str


class ErrorBody(BaseModel):
    """Structured error body."""
    type: str
    message: str
    details: dict[str, object] | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody
    meta: dict[str, object]


def _build_meta(request: Request) -> dict[str, object]:
    """Collect metadata for error pages."""
    return {
        "request_id": getattr(request.state, "correlation_id", "-"),
        "path": request.url.path,
        "method": request.method,
    }


def _render_error(request: Request, status_code: int, body: ErrorBody) -> Response:
    envelope = ErrorEnvelope(error=body, meta=_build_meta(request))
    return render(
        request,
        "error.html",
        {"title": "Error", "status_code": status_code, **envelope.model_dump()},
        status_code=status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers rendering the error page."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> Response:
        logger = get_logger(__name__, request)
        if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s: %s", exc.kind, exc.message, exc_info=exc.__cause__)
        else:
            logger.warning("%s: %s", exc.kind, exc.message, extra={"status_code": exc.status_code})
        return _render_error(
            request, exc.status_code, ErrorBody(type=exc.kind, message=exc.message)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        return _render_error(
            request,
            exc.status_code,
            ErrorBody(type="http_error", message=str(exc.detail or "HTTP error")),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> Response:
        logger = get_logger(__name__, request)
        logger.info("Request validation error")
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        return _render_error(
            request,
            HTTP_422_UNPROCESSABLE_CONTENT,
            ErrorBody(
                type="validation_error",
                message="Invalid request",
                details={"fields": fields},
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return _render_error(
            request,
            HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorBody(type="server_error", message="Internal Server Error"),
        )
