# hc_core/records/selectors.py
from __future__ import annotations

from datetime import timedelta

from django.db.models import Count, QuerySet
from django.utils import timezone

from hc_core.common.permissions import ROLE_ADMIN, has_role
from hc_core.records.models import MedicalRecord


def records_for(*, user) -> QuerySet[MedicalRecord]:
    qs = MedicalRecord.objects.all()
    if has_role(user, ROLE_ADMIN):
        return qs
    return qs.filter(doctor=user)


def record_with_attachment(*, user, filename: str) -> MedicalRecord | None:
    # JSONField __contains is not available on every backend (SQLite)
    for record in records_for(user=user).filter(is_active=True).only("id", "attachments"):
        if filename in (record.attachments or []):
            return record
    return None


def record_stats(*, user) -> dict:
    qs = records_for(user=user).filter(is_active=True)
    since = timezone.localdate() - timedelta(days=30)

    return {
        "total": qs.count(),
        "by_type": {r["record_type"]: r["n"] for r in qs.values("record_type").annotate(n=Count("id"))},
        "by_status": {r["status"]: r["n"] for r in qs.values("status").annotate(n=Count("id"))},
        "last_30_days": qs.filter(date__gte=since).count(),
        "patients": qs.values("patient_id").distinct().count(),
    }
