from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from app.schemas.validation import field_errors, register_wire_names


class OwnerRole(str, Enum):
    CEO = "CEO"
    CFO = "CFO"
    CTO = "CTO"
    SHAREHOLDER = "Shareholder"
    ADVISOR = "Advisor"


OWNER_FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "ownership_percentage": "Ownership percentage",
    "role": "Role",
}


def plain_address(v):
    """Reject the "Name <address>" form; only a bare local@domain.tld address is accepted."""
    if isinstance(v, str) and ("<" in v or ">" in v or v != v.strip()):
        raise ValueError("Invalid email format")
    return v


class OwnerCreate(BaseModel):
    name: str = Field(..., description="Display name of the owner")
    email: EmailStr = Field(..., description="Contact email address")
    ownership_percentage: float = Field(
        ..., ge=0, le=100, strict=True, alias="ownershipPercentage",
        description="Share of the company held, 0-100",
    )
    role: OwnerRole = Field(..., description="Role of the owner in the company")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_shape(cls, v):
        return plain_address(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class OwnerUpdate(BaseModel):
    """Partial update: absent fields are left untouched, explicit nulls are rejected."""

    name: Optional[str] = Field(None, description="Updated display name")
    email: Optional[EmailStr] = Field(None, description="Updated email address")
    ownership_percentage: Optional[float] = Field(
        None, ge=0, le=100, strict=True, alias="ownershipPercentage",
        description="Updated ownership percentage",
    )
    role: Optional[OwnerRole] = Field(None, description="Updated role")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_shape(cls, v):
        return plain_address(v)

    @field_validator("name", "email", "ownership_percentage", "role", mode="before")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            label = OWNER_FIELD_LABELS[info.field_name]
            raise PydanticCustomError("required", f"{label} is required")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


register_wire_names(OwnerCreate, OwnerUpdate)


class OwnerResponse(BaseModel):
    id: str
    name: str
    email: str
    ownership_percentage: float = Field(..., alias="ownershipPercentage")
    role: OwnerRole
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class OwnerEnvelope(BaseModel):
    status: str
    message: str
    data: OwnerResponse


class OwnerListResponse(BaseModel):
    status: str
    message: str
    data: List[OwnerResponse]
    page: int
    page_size: int = Field(..., alias="pageSize")
    total: int

    model_config = ConfigDict(populate_by_name=True)


class OwnershipSummary(BaseModel):
    total_ownership: float = Field(..., alias="totalOwnership")
    owner_count: int = Field(..., alias="ownerCount")
    exceeds_limit: bool = Field(..., alias="exceedsLimit")
    warning: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


def validate_owner_form(data: Mapping[str, Any], partial: bool = False) -> Dict[str, str]:
    """
    Run the owner validation rules outside of a request.

    Returns the field -> message map; empty when ``data`` is valid.
    """
    schema = OwnerUpdate if partial else OwnerCreate
    try:
        schema.model_validate(dict(data))
    except ValidationError as exc:
        return field_errors(exc.errors())
    return {}
