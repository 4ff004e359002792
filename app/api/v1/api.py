from fastapi import APIRouter
from app.api.v1.endpoints import (
    owners,
    audit_logs,
    settings,
)

api_router = APIRouter()

api_router.include_router(owners.router, prefix="/owners", tags=["owners"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit-logs"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
