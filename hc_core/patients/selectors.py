# hc_core/patients/selectors.py
from __future__ import annotations

from django.db.models import Count, QuerySet

from hc_core.common.display import calculate_age
from hc_core.patients.models import Patient


def active_patients() -> QuerySet[Patient]:
    return Patient.objects.filter(is_active=True)


def get_patient_by_nic(*, nic: str) -> Patient:
    return Patient.objects.get(nic__iexact=(nic or "").strip(), is_active=True)


def patient_stats() -> dict:
    qs = active_patients()

    by_gender = {row["gender"]: row["n"] for row in qs.values("gender").annotate(n=Count("id"))}
    by_blood_type = {
        row["blood_type"]: row["n"]
        for row in qs.exclude(blood_type="").values("blood_type").annotate(n=Count("id"))
    }

    ages = [calculate_age(dob) for dob in qs.values_list("date_of_birth", flat=True) if dob]
    average_age = round(sum(ages) / len(ages), 1) if ages else 0

    return {
        "total": qs.count(),
        "by_gender": by_gender,
        "by_blood_type": by_blood_type,
        "average_age": average_age,
    }
