# hc_core/appointments/selectors.py
from __future__ import annotations

from django.db.models import Count, QuerySet
from django.utils import timezone

from hc_core.appointments.models import OPEN_STATUSES, Appointment, AppointmentStatus
from hc_core.common.permissions import ROLE_ADMIN, has_role


def appointments_for(*, user) -> QuerySet[Appointment]:
    qs = Appointment.objects.all()
    if has_role(user, ROLE_ADMIN):
        return qs
    return qs.filter(provider=user)


def slot_taken(*, provider, appointment_date, appointment_time, exclude_id=None) -> bool:
    qs = Appointment.objects.filter(
        provider=provider,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        is_active=True,
    ).exclude(status__in=[AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW])
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def appointment_stats(*, user) -> dict:
    qs = appointments_for(user=user).filter(is_active=True)
    today = timezone.localdate()

    by_status = {s: 0 for s in AppointmentStatus.values}
    for row in qs.values("status").annotate(n=Count("id")):
        by_status[row["status"]] = row["n"]

    return {
        "total": qs.count(),
        "today": qs.filter(appointment_date=today).count(),
        "upcoming": qs.filter(appointment_date__gte=today, status__in=OPEN_STATUSES).count(),
        "this_month": qs.filter(appointment_date__year=today.year, appointment_date__month=today.month).count(),
        "by_status": by_status,
        "by_service_type": {r["service_type"]: r["n"] for r in qs.values("service_type").annotate(n=Count("id"))},
    }
