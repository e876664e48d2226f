# hc_core/common/validators.py
"""
Field rules shared by the API serializers and the client-side forms.

Each check returns an error message, or None when the value is fine, so the
same rule can feed a DRF ValidationError on the server and a field->message
map on the client.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any, Iterable, Mapping

PHONE_RE = re.compile(r"^\+?[\d\s\-()]+$")
TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
NIC_RE = re.compile(r"^[0-9]{9}[vVxX]?$|^[0-9]{12}$")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MEDICATION_REQUIRED_FIELDS = ("name", "dosage", "frequency", "duration")

PHONE_MSG = "Please enter a valid phone number"
TIME_FORMAT_MSG = "Time must be in HH:MM format"
HOURS_ORDER_MSG = "Opening time must be before closing time"
HOURS_REQUIRED_MSG = "Opening and closing times are required unless open 24 hours"
NIC_MSG = "Please enter a valid NIC number"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def required_error(value: Any, label: str) -> str | None:
    return f"{label} is required" if is_blank(value) else None


def phone_error(value: Any) -> str | None:
    if is_blank(value):
        return None
    return None if PHONE_RE.match(str(value).strip()) else PHONE_MSG


def nic_error(value: Any) -> str | None:
    if is_blank(value):
        return None
    return None if NIC_RE.match(str(value).strip()) else NIC_MSG


def parse_time(value: Any) -> time | None:
    """
    Accepts a datetime.time or an "H:MM"/"HH:MM" string (24h). Returns None
    when the value cannot be read as a time of day.
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    raw = value.strip()
    # "HH:MM:SS" as serialized by DRF TimeField
    if raw.count(":") == 2:
        raw = raw.rsplit(":", 1)[0]
    if not TIME_RE.match(raw):
        return None
    hours, minutes = raw.split(":")
    return time(int(hours), int(minutes))


def time_format_error(value: Any) -> str | None:
    if is_blank(value):
        return None
    return None if parse_time(value) is not None else TIME_FORMAT_MSG


def time_range_error(opening: Any, closing: Any) -> str | None:
    start = parse_time(opening)
    end = parse_time(closing)
    if start is None or end is None:
        return None
    return None if start < end else HOURS_ORDER_MSG


def parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def not_future_error(value: Any, *, today: date | None = None, label: str = "Date") -> str | None:
    d = parse_date(value)
    if d is None:
        return None
    today = today or date.today()
    return f"{label} cannot be in the future" if d > today else None


def not_past_error(value: Any, *, today: date | None = None, label: str = "Date") -> str | None:
    d = parse_date(value)
    if d is None:
        return None
    today = today or date.today()
    return f"{label} cannot be in the past" if d < today else None


def medication_errors(medications: Iterable[Mapping[str, Any]] | None) -> list[str]:
    """
    Every medication entry needs all of name, dosage, frequency and duration.
    """
    errors: list[str] = []
    for idx, med in enumerate(medications or [], start=1):
        if not isinstance(med, Mapping):
            errors.append(f"Medication {idx}: invalid entry")
            continue
        missing = [f for f in MEDICATION_REQUIRED_FIELDS if is_blank(med.get(f))]
        if missing:
            errors.append(f"Medication {idx}: {', '.join(missing)} required")
    return errors
