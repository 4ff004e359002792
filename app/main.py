from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.api import api_router
from app.core.config import Settings, settings
from app.core.logging import setup_logging, get_logger
from app.middleware.logging import RequestLoggingMiddleware
from app.core.exceptions import (
    NotFoundError,
    http_exception_handler,
    request_validation_exception_handler,
    not_found_exception_handler,
    sqlalchemy_error_handler,
    unhandled_exception_handler,
)
from app.services.audit_service import AuditLogService
from app.services.settings_service import SettingsService
from app.store import build_owner_store
from app.store.base import Clock, OwnerStore

# Setup logging
setup_logging()
logger = get_logger("main")


def create_app(
    app_settings: Optional[Settings] = None,
    owner_store: Optional[OwnerStore] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build the API application.

    ``owner_store`` and ``clock`` let tests inject their own store and time
    source; by default the store named in settings is created and seeded.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.VERSION,
        description="Back office admin API: owner records, audit trail and company settings",
        openapi_url=f"{app_settings.API_V1_STR}/openapi.json",
    )

    app.state.owner_store = owner_store or build_owner_store(app_settings, clock=clock)
    app.state.audit_log = AuditLogService(clock=clock)
    app.state.settings_service = SettingsService(app.state.audit_log)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=app_settings.API_V1_STR)

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {app_settings.PROJECT_NAME}"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    # Exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.info("%s %s ready", app_settings.PROJECT_NAME, app_settings.VERSION)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
