# hc_core/prescriptions/models.py
from __future__ import annotations

import re
from datetime import date, timedelta

from django.conf import settings
from django.db import models

from hc_core.common.models import ResourceModel

DAYS_RE = re.compile(r"(\d+)\s+days?", re.IGNORECASE)


class PrescriptionStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


def end_date_from_medications(start_date: date | None, medications) -> date | None:
    """
    "7 days" / "1 day" on the first medication's duration gives start + N days.
    """
    if start_date is None or not medications:
        return None
    match = DAYS_RE.search(str(medications[0].get("duration") or ""))
    if not match:
        return None
    return start_date + timedelta(days=int(match.group(1)))


class Prescription(ResourceModel):
    prescription_number = models.CharField(max_length=11, unique=True, editable=False)  # RX-00000001

    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="prescriptions")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="prescriptions")

    diagnosis = models.CharField(max_length=500)
    # [{name, dosage, frequency, duration, instructions, quantity, refills}]
    medications = models.JSONField(default=list)
    notes = models.TextField(max_length=1000, blank=True)

    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=16,
        choices=PrescriptionStatus.choices,
        default=PrescriptionStatus.ACTIVE,
        db_index=True,
    )

    class Meta:
        db_table = "prescriptions_prescription"
        indexes = [
            models.Index(fields=["doctor", "status"]),
            models.Index(fields=["patient", "status"]),
            models.Index(fields=["start_date"]),
        ]

    def __str__(self) -> str:
        return self.prescription_number

    @property
    def total_medications(self) -> int:
        return len(self.medications or [])

    def is_expired(self, today: date | None = None) -> bool:
        if self.end_date is None:
            return False
        return (today or date.today()) > self.end_date

    @property
    def total_days(self) -> int:
        if self.end_date is None or self.start_date is None:
            return 0
        return abs((self.end_date - self.start_date).days)

    def has_refills_available(self) -> bool:
        return any(int(m.get("refills") or 0) > 0 for m in self.medications or [])

    def can_be_renewed(self) -> bool:
        return self.status == PrescriptionStatus.ACTIVE and not self.is_expired() and self.has_refills_available()
