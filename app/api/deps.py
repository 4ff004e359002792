"""
FastAPI dependencies.

The store, audit log and settings live on ``app.state`` for the lifetime of
the process; services are built per request around them.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from app.services.audit_service import SYSTEM_ACTOR, Actor, AuditLogService
from app.services.owner_service import OwnerService
from app.services.settings_service import SettingsService
from app.store.base import OwnerStore


def get_owner_store(request: Request) -> OwnerStore:
    return request.app.state.owner_store


def get_audit_log(request: Request) -> AuditLogService:
    return request.app.state.audit_log


def get_settings_service(request: Request) -> SettingsService:
    return request.app.state.settings_service


def get_actor(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_name: Optional[str] = Header(None, alias="X-User-Name"),
) -> Actor:
    """Who to attribute audit entries to; headers are trusted as-is."""
    if not x_user_id:
        return SYSTEM_ACTOR
    return Actor(user_id=x_user_id, user_name=x_user_name or x_user_id)


def get_owner_service(
    store: OwnerStore = Depends(get_owner_store),
    audit_log: AuditLogService = Depends(get_audit_log),
    actor: Actor = Depends(get_actor),
) -> OwnerService:
    return OwnerService(store, audit_log, actor=actor)
