# hc_core/prescriptions/selectors.py
from __future__ import annotations

from collections import Counter
from datetime import timedelta

from django.db.models import Count, Max, QuerySet
from django.db.models.functions import TruncMonth
from django.utils import timezone

from hc_core.common.permissions import ROLE_ADMIN, ROLE_DOCTOR, has_role
from hc_core.prescriptions.models import Prescription, PrescriptionStatus


def next_prescription_number() -> str:
    # zero padded, so the lexicographic max is the numeric max
    last = Prescription.objects.aggregate(m=Max("prescription_number"))["m"]
    n = int(last.split("-", 1)[1]) + 1 if last else 1
    return f"RX-{n:08d}"


def prescriptions_for(*, user) -> QuerySet[Prescription]:
    qs = Prescription.objects.all()
    if has_role(user, ROLE_ADMIN):
        return qs
    if has_role(user, ROLE_DOCTOR):
        return qs.filter(doctor=user)
    return qs


def prescription_stats(*, user) -> dict:
    qs = prescriptions_for(user=user).filter(is_active=True)
    total = qs.count()

    by_status = {s: 0 for s in PrescriptionStatus.values}
    for row in qs.values("status").annotate(n=Count("id")):
        by_status[row["status"]] = row["n"]

    monthly = [
        {"month": row["month"].strftime("%Y-%m"), "prescriptions": row["n"]}
        for row in qs.annotate(month=TruncMonth("created_at"))
        .values("month")
        .annotate(n=Count("id"))
        .order_by("month")
        if row["month"] is not None
    ][-12:]

    counts: Counter[str] = Counter()
    quantities: Counter[str] = Counter()
    for medications in qs.values_list("medications", flat=True):
        for med in medications or []:
            name = str(med.get("name") or "").strip()
            if not name:
                continue
            counts[name] += 1
            quantities[name] += int(med.get("quantity") or 0)

    top = [
        {"name": name, "count": n, "total_quantity": quantities[name]}
        for name, n in counts.most_common(10)
    ]

    return {
        "total": total,
        "recent": qs.filter(created_at__gte=timezone.now() - timedelta(days=7)).count(),
        "by_status": by_status,
        "monthly": monthly,
        "top_medications": top,
        "total_unique_medications": len(counts),
        "active_rate": round(by_status[PrescriptionStatus.ACTIVE] / total * 100) if total else 0,
    }
