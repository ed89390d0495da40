from __future__ import annotations

import dataclasses
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

CENTS = Decimal("0.01")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def optional_str(value) -> Optional[str]:
    if value is None:
        return None
    v = str(value).strip()
    return v or None


def _as_int(value) -> int:
    """int() that refuses booleans and fractional numbers instead of truncating."""
    if isinstance(value, bool):
        raise TypeError("boolean is not an integer")
    if isinstance(value, (float, Decimal)) and value != int(value):
        raise ValueError("fractional number")
    return int(value)


def require_id(value, field_name: str) -> int:
    try:
        v = _as_int(value)
    except (TypeError, ValueError, OverflowError, InvalidOperation):
        raise ValidationError(f"{field_name} is invalid")
    if v <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return v


def optional_id(value, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_id(value, field_name)


def to_int(value, field_name: str, *, min_value: Optional[int] = None, max_value: Optional[int] = None) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        v = _as_int(value)
    except (TypeError, ValueError, OverflowError, InvalidOperation):
        raise ValidationError(f"{field_name} must be an integer")
    if min_value is not None and v < min_value:
        raise ValidationError(f"{field_name} must be >= {min_value}")
    if max_value is not None and v > max_value:
        raise ValidationError(f"{field_name} must be <= {max_value}")
    return v


def to_decimal(value, field_name: str, *, min_value: Optional[Decimal] = Decimal("0")) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        v = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not v.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if min_value is not None and v < min_value:
        raise ValidationError(f"{field_name} must be >= {min_value}")
    return v


def to_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def to_bool(value, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def to_enum(enum_cls: Type[E], value, field_name: str, *, default: Optional[E] = None) -> E:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_email(value, field_name: str = "email") -> Optional[str]:
    v = optional_str(value)
    if v is not None and not _EMAIL_RE.match(v):
        raise ValidationError(f"{field_name} is not a valid e-mail")
    return v


def optional_url(value, field_name: str) -> Optional[str]:
    v = optional_str(value)
    if v is not None and not _URL_RE.match(v):
        raise ValidationError(f"{field_name} must be a valid http(s) URL")
    return v


def digits_only(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return re.sub(r"\D", "", value) or None


def merge_payload(payload: Optional[dict], existing=None) -> dict:
    """Overlay a (partial) request payload on an existing entity's fields."""
    base = dataclasses.asdict(existing) if existing is not None else {}
    base.update(payload or {})
    return base
