from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    VIEW = "VIEW"


class FieldChange(BaseModel):
    old: Any = None
    new: Any = None


class AuditLogResponse(BaseModel):
    id: str
    timestamp: datetime
    user_id: str = Field(..., alias="userId")
    user_name: str = Field(..., alias="userName")
    action: AuditAction
    entity_type: str = Field(..., alias="entityType")
    entity_id: str = Field(..., alias="entityId")
    changes: Optional[Dict[str, FieldChange]] = None
    metadata: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class AuditLogListResponse(BaseModel):
    status: str
    message: str
    data: List[AuditLogResponse]
    page: int
    page_size: int = Field(..., alias="pageSize")
    total: int
    total_pages: int = Field(..., alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)
