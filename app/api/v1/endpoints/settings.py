from fastapi import APIRouter, Depends, status

from app.api.deps import get_actor, get_settings_service
from app.schemas.settings import CompanySettingsEnvelope, CompanySettingsUpdate
from app.services.audit_service import Actor
from app.services.settings_service import SettingsService

router = APIRouter()


@router.get("", response_model=CompanySettingsEnvelope, status_code=status.HTTP_200_OK)
def get_settings(service: SettingsService = Depends(get_settings_service)):
    return {
        "status": "success",
        "message": "Settings fetched successfully",
        "data": service.get_settings(),
    }


@router.put("", response_model=CompanySettingsEnvelope, status_code=status.HTTP_200_OK)
def update_settings(
    payload: CompanySettingsUpdate,
    service: SettingsService = Depends(get_settings_service),
    actor: Actor = Depends(get_actor),
):
    """Save the supplied settings fields; the rest keep their current values."""
    return {
        "status": "success",
        "message": "Settings saved successfully",
        "data": service.update_settings(payload, actor=actor),
    }
