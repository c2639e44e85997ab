# backend/fitstudio/services/validation.py
"""
Client field validation shared by the public and staff booking paths.
"""

import re
from datetime import date

from ..errors import ValidationError
from .slots.config import is_valid_time_str, parse_date_str

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-().]{7,20}$")


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match((email or "").strip()))


def validate_phone(phone: str) -> bool:
    return bool(PHONE_RE.match((phone or "").strip()))


def validate_name(name: str) -> bool:
    trimmed = (name or "").strip()
    return 2 <= len(trimmed) <= 100


def validate_client_fields(name: str, email: str, phone: str) -> dict[str, str]:
    """Returns {field: message} for every invalid field; empty dict when valid."""
    errors: dict[str, str] = {}
    if not validate_name(name):
        errors["clientName"] = "Name must be 2-100 characters"
    if not validate_email(email):
        errors["clientEmail"] = "Please enter a valid email address"
    if not validate_phone(phone):
        errors["clientPhone"] = "Please enter a valid phone number"
    return errors


def require_valid_client(name: str, email: str, phone: str) -> None:
    errors = validate_client_fields(name, email, phone)
    if errors:
        raise ValidationError("; ".join(errors.values()))


def require_date(value: str) -> date:
    try:
        return parse_date_str(value)
    except ValueError:
        raise ValidationError("Date must be in YYYY-MM-DD format") from None


def require_time(value: str) -> str:
    if not is_valid_time_str(value):
        raise ValidationError("Time must be in HH:MM format")
    return value


def require_not_past(target_date: date, today: date) -> None:
    if target_date < today:
        raise ValidationError("Cannot book a date in the past")
