from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_email(value: Optional[str], field_name: str = "Email") -> Optional[str]:
    v = (value or "").strip()
    if not v:
        return None
    if not _EMAIL_RE.match(v):
        raise ValidationError(f"{field_name} is not a valid address")
    return v.lower()


def require_enum(enum_cls, value, field_name: str):
    try:
        return value if isinstance(value, enum_cls) else enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not valid: {value!r}")
