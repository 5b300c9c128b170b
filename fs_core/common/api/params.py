# fs_core/common/api/params.py
from __future__ import annotations

from uuid import UUID

from rest_framework.exceptions import ValidationError as DRFValidationError


def uuid_or_none(value: str | None, field_name: str) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise DRFValidationError({field_name: "Invalid UUID"})


def require_uuid(value: str | None, field_name: str) -> UUID:
    parsed = uuid_or_none(value, field_name)
    if parsed is None:
        raise DRFValidationError({field_name: "This parameter is required."})
    return parsed


def bool_param(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")
