# hc_core/iam/selectors.py
from __future__ import annotations

from datetime import time

from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from hc_core.appointments.selectors import slot_taken
from hc_core.common.permissions import ROLE_DOCTOR


def doctors() -> QuerySet:
    User = get_user_model()
    return (
        User.objects.filter(groups__name=ROLE_DOCTOR, is_active=True)
        .select_related("hc_profile")
        .order_by("last_name", "first_name", "username")
        .distinct()
    )


def available_doctors(*, day: str, at: time | None = None, on=None, specialization: str | None = None, qs=None) -> list:
    """
    Doctors working on `day` (and at `at`, when given). With a concrete date
    `on` and a time, doctors already booked in that slot are left out.
    """
    qs = qs if qs is not None else doctors()
    if specialization:
        qs = qs.filter(hc_profile__specialization__icontains=specialization.strip())

    # available_days is a JSON list; matched in Python so SQLite works too
    result = []
    for doctor in qs:
        profile = getattr(doctor, "hc_profile", None)
        if profile is None or not profile.is_available(day, at):
            continue
        if on is not None and at is not None and slot_taken(provider=doctor, appointment_date=on, appointment_time=at):
            continue
        result.append(doctor)
    return result
