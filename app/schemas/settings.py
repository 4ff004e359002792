from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from app.schemas.owner import plain_address
from app.schemas.validation import register_wire_names

SETTINGS_FIELD_LABELS = {
    "company_name": "Company name",
    "company_email": "Company email",
    "company_phone": "Company phone",
    "company_address": "Company address",
    "tax_id": "Tax ID",
    "fiscal_year_end": "Fiscal year end",
    "currency": "Currency",
    "timezone": "Timezone",
    "email_notifications": "Email notifications",
    "audit_log_retention": "Audit log retention",
}


class CompanySettings(BaseModel):
    """Company-wide settings edited from the settings screen."""

    company_name: str = Field(..., min_length=1, alias="companyName")
    company_email: EmailStr = Field(..., alias="companyEmail")
    company_phone: str = Field("", alias="companyPhone")
    company_address: str = Field("", alias="companyAddress")
    tax_id: str = Field("", alias="taxId")
    fiscal_year_end: int = Field(12, ge=1, le=12, alias="fiscalYearEnd", description="Month number, 1-12")
    currency: str = Field("USD", min_length=3, max_length=3)
    timezone: str = Field("UTC")
    email_notifications: Literal["enabled", "disabled"] = Field("enabled", alias="emailNotifications")
    audit_log_retention: int = Field(90, gt=0, alias="auditLogRetention", description="Days to keep audit entries")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("company_email", mode="before")
    @classmethod
    def validate_email_shape(cls, v):
        return plain_address(v)


class CompanySettingsUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=1, alias="companyName")
    company_email: Optional[EmailStr] = Field(None, alias="companyEmail")
    company_phone: Optional[str] = Field(None, alias="companyPhone")
    company_address: Optional[str] = Field(None, alias="companyAddress")
    tax_id: Optional[str] = Field(None, alias="taxId")
    fiscal_year_end: Optional[int] = Field(None, ge=1, le=12, alias="fiscalYearEnd")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = None
    email_notifications: Optional[Literal["enabled", "disabled"]] = Field(None, alias="emailNotifications")
    audit_log_retention: Optional[int] = Field(None, gt=0, alias="auditLogRetention")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("company_email", mode="before")
    @classmethod
    def validate_email_shape(cls, v):
        return plain_address(v)

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            label = SETTINGS_FIELD_LABELS.get(info.field_name, info.field_name)
            raise PydanticCustomError("required", f"{label} is required")
        return v


register_wire_names(CompanySettings, CompanySettingsUpdate)


class CompanySettingsEnvelope(BaseModel):
    status: str
    message: str
    data: CompanySettings
