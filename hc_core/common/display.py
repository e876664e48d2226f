# hc_core/common/display.py
"""
Computed display fields. Pure functions of stored data; nothing here is persisted.

Serializers, the client views and the forms all call these so a value such as
a patient's age is identical wherever it is shown.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings


def calculate_age(birth_date: date | datetime | None, today: date | None = None) -> int | None:
    """
    Whole years between birth_date and today.

    age = today.year - birth.year, minus one when today's (month, day) falls
    before the birthday's (month, day).
    """
    if birth_date is None:
        return None
    if isinstance(birth_date, datetime):
        birth_date = birth_date.date()
    today = today or date.today()

    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def calculate_bmi(height_cm, weight_kg) -> float | None:
    if not height_cm or not weight_kg:
        return None
    meters = float(height_cm) / 100
    return round(float(weight_kg) / (meters * meters), 1)


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_currency(amount, currency: str | None = None) -> str:
    """
    format_currency(1234.5) -> "LKR 1,234.50"
    """
    if currency is None:
        currency = getattr(settings, "HC_CURRENCY", "LKR") if settings.configured else "LKR"
    return f"{currency} {money(amount or 0):,.2f}"


def format_duration(minutes) -> str:
    minutes = int(minutes or 0)
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m"
