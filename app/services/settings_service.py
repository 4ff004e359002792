from typing import Optional

from app.core.logging import get_logger
from app.schemas.audit import AuditAction
from app.schemas.settings import CompanySettings, CompanySettingsUpdate
from app.services.audit_service import SYSTEM_ACTOR, Actor, AuditLogService, diff_fields

logger = get_logger("services.settings")

SETTINGS_ENTITY = "settings"
SETTINGS_ENTITY_ID = "company"


def default_settings() -> CompanySettings:
    return CompanySettings(
        company_name="Acme Corporation",
        company_email="contact@acme.com",
        company_phone="+1 (555) 123-4567",
        company_address="123 Business St, Suite 100, San Francisco, CA 94105",
        tax_id="12-3456789",
        fiscal_year_end=12,
        currency="USD",
        timezone="America/Los_Angeles",
        email_notifications="enabled",
        audit_log_retention=90,
    )


class SettingsService:
    """Holds the company settings in memory."""

    def __init__(self, audit_log: AuditLogService, initial: Optional[CompanySettings] = None):
        self.audit_log = audit_log
        self._settings = initial or default_settings()

    def get_settings(self) -> CompanySettings:
        return self._settings.model_copy()

    def update_settings(self, data: CompanySettingsUpdate, actor: Actor = SYSTEM_ACTOR) -> CompanySettings:
        values = data.model_dump(exclude_unset=True, by_alias=True)
        current = self._settings.model_dump(by_alias=True)
        changes = diff_fields(current, values)

        self._settings = CompanySettings.model_validate({**current, **values})

        if changes:
            self.audit_log.record(
                AuditAction.UPDATE,
                SETTINGS_ENTITY,
                SETTINGS_ENTITY_ID,
                actor=actor,
                changes=changes,
            )
            logger.info("Settings updated (fields: %s)", ", ".join(changes))
        else:
            logger.info("Settings update requested with no changes")
        return self.get_settings()
