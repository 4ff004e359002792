"""
Field-level validation errors shared by the API and the frontend view models.

Pydantic reports errors as a list of ``{"loc", "type", "msg", "ctx"}``
dicts; the rest of the application speaks in a ``field -> message`` map.
"""

from typing import Any, Dict, Iterable, List, Mapping, Type

from pydantic import BaseModel, ConfigDict, Field

# Messages per wire field name and Pydantic error type; "*" is the fallback
# for any type not listed. Custom errors raised with the "required" type and
# plain ValueErrors from field validators already carry their final message.
FIELD_MESSAGES: Dict[str, Dict[str, str]] = {
    "name": {
        "missing": "Name is required",
        "*": "Name must be a string",
    },
    "email": {
        "missing": "Email is required",
        "value_error": "Invalid email format",
        "*": "Invalid email format",
    },
    "ownershipPercentage": {
        "missing": "Ownership percentage is required",
        "greater_than_equal": "Ownership percentage must be at least 0",
        "less_than_equal": "Ownership percentage cannot exceed 100",
        "*": "Ownership percentage must be a number",
    },
    "role": {
        "missing": "Role is required",
        "*": "Invalid role",
    },
    "companyEmail": {
        "value_error": "Invalid email format",
        "*": "Invalid email format",
    },
    "fiscalYearEnd": {
        "*": "Fiscal year end must be a month between 1 and 12",
    },
    "auditLogRetention": {
        "*": "Audit log retention must be a positive number of days",
    },
    "emailNotifications": {
        "*": "Email notifications must be 'enabled' or 'disabled'",
    },
}


class ValidationErrorShape(BaseModel):
    """Error payload returned when one or more fields fail validation."""

    field_errors: Dict[str, str] = Field(default_factory=dict, alias="fieldErrors")
    row_errors: List[str] = Field(default_factory=list, alias="rowErrors")
    global_errors: List[str] = Field(default_factory=list, alias="globalErrors")

    model_config = ConfigDict(populate_by_name=True)

    def has_errors(self) -> bool:
        return bool(self.field_errors or self.row_errors or self.global_errors)


# Python field name -> wire alias, filled by register_wire_names()
WIRE_NAMES: Dict[str, str] = {}


def register_wire_names(*models: Type[BaseModel]) -> None:
    """
    Record the aliases of ``models`` so errors on snake_case input are
    reported under the camelCase name clients send.
    """
    for model in models:
        for name, info in model.model_fields.items():
            if info.alias:
                WIRE_NAMES[name] = info.alias


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    if not parts:
        return "__root__"
    parts[0] = WIRE_NAMES.get(parts[0], parts[0])
    return parts[0] if len(parts) == 1 else ".".join(parts)


def _message(field: str, error: Mapping[str, Any]) -> str:
    error_type = error.get("type", "")
    if error_type == "required":
        return error["msg"]

    messages = FIELD_MESSAGES.get(field, {})
    if error_type in messages:
        return messages[error_type]
    if error_type == "value_error":
        ctx_error = (error.get("ctx") or {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)
    if "*" in messages:
        return messages["*"]
    if error_type == "missing":
        return f"{field} is required"
    return error.get("msg", "Invalid value")


def field_errors(errors: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """Collapse Pydantic errors into one message per field (first error wins)."""
    result: Dict[str, str] = {}
    for error in errors:
        field = _field_name(error.get("loc", ()))
        if field not in result:
            result[field] = _message(field, error)
    return result
