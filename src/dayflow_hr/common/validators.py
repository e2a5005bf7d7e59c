from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Type, TypeVar

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_month

E = TypeVar("E")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(str(value)) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return str(value)


def require_email(value: Any, field_name: str = "email") -> str:
    email = require_non_empty(value, field_name).lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValidationError(f"{field_name} must be an email")
    return email


def require_date(payload: Mapping[str, Any], field_name: str):
    raw = payload.get(field_name)
    if not raw:
        raise ValidationError(f"{field_name} is required")
    return parse_date_value(raw, field_name)


def parse_date_value(raw: Any, field_name: str) -> date:
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def optional_date(payload: Mapping[str, Any], field_name: str) -> Optional[date]:
    raw = payload.get(field_name)
    if not raw:
        return None
    return parse_date_value(raw, field_name)


def require_month(raw: Any, field_name: str = "month") -> date:
    if not raw:
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_month(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be a month (YYYY-MM)")


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_amount(value: Any, field_name: str, *, default: Any = None) -> Decimal:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        value = default
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0:
        raise ValidationError("Salary components cannot be negative")
    return amount


def optional_amount(payload: Mapping[str, Any], field_name: str) -> Optional[Decimal]:
    if payload.get(field_name) is None:
        return None
    return require_amount(payload.get(field_name), field_name)
