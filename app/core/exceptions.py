from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import get_logger
from app.schemas.validation import ValidationErrorShape, field_errors

logger = get_logger("exceptions")


class NotFoundError(Exception):
    """A referenced identifier does not exist."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class OwnerNotFoundError(NotFoundError):
    def __init__(self, owner_id: str):
        self.owner_id = owner_id
        super().__init__(f"Owner with ID {owner_id} not found")


def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")

    if isinstance(exc.detail, dict):
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": "error", **exc.detail},
            headers=getattr(exc, "headers", None),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = field_errors(exc.errors())
    logger.warning(f"Validation Error on {request.method} {request.url.path}: {errors}")
    shape = ValidationErrorShape(field_errors=errors)
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "message": "Validation error",
            **shape.model_dump(by_alias=True),
        },
    )


def not_found_exception_handler(request: Request, exc: NotFoundError):
    logger.error(f"Not Found: {exc.message}")
    return JSONResponse(
        status_code=404,
        content={"status": "error", "message": exc.message},
    )


def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    """Catch-all for SQLAlchemy errors raised by the SQL-backed store."""
    logger.error(f"SQLAlchemy Error: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "message": "Database error occurred.",
        },
    )


def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled Exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "message": "Internal server error",
        },
    )
