# hc_core/pharmacies/models.py
from __future__ import annotations

from datetime import datetime

from django.conf import settings
from django.db import models
from django.utils import timezone

from hc_core.common.models import ResourceModel
from hc_core.common.validators import WEEKDAYS


class PharmacyStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"
    MAINTENANCE = "MAINTENANCE", "Maintenance"


class Pharmacy(ResourceModel):
    name = models.CharField(max_length=100, unique=True)

    address = models.CharField(max_length=100)
    city = models.CharField(max_length=50)
    state = models.CharField(max_length=50, blank=True)
    zip_code = models.CharField(max_length=10, blank=True)
    country = models.CharField(max_length=50, default="Sri Lanka")

    phone = models.CharField(max_length=32)
    email = models.EmailField(blank=True)
    website = models.URLField(blank=True)

    pharmacist_name = models.CharField(max_length=100, blank=True)
    license_number = models.CharField(max_length=64, unique=True)

    opening_time = models.TimeField(null=True, blank=True)
    closing_time = models.TimeField(null=True, blank=True)
    is_24_hours = models.BooleanField(default=False)
    closed_days = models.JSONField(default=list, blank=True)  # lowercase weekday names

    services = models.JSONField(default=list, blank=True)
    description = models.TextField(max_length=500, blank=True)

    status = models.CharField(
        max_length=16,
        choices=PharmacyStatus.choices,
        default=PharmacyStatus.ACTIVE,
        db_index=True,
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="pharmacies",
    )

    class Meta:
        db_table = "pharmacies_pharmacy"
        verbose_name_plural = "pharmacies"
        indexes = [
            models.Index(fields=["created_by", "status"]),
            models.Index(fields=["city"]),
        ]

    def __str__(self) -> str:
        return self.name

    def is_open(self, at: datetime | None = None) -> bool:
        """
        Open right now (or at `at`): always for 24h pharmacies, never on a
        closed day, otherwise opening_time <= now <= closing_time.
        """
        if self.is_24_hours:
            return True

        at = at or timezone.localtime()
        if WEEKDAYS[at.weekday()] in {str(d).lower() for d in (self.closed_days or [])}:
            return False

        if self.opening_time is None or self.closing_time is None:
            return False
        now = at.time().replace(second=0, microsecond=0)
        return self.opening_time <= now <= self.closing_time

    @property
    def formatted_hours(self) -> str:
        if self.is_24_hours:
            return "Open 24 hours"
        if self.opening_time is None or self.closing_time is None:
            return "Hours not set"
        return f"{self.opening_time:%H:%M} - {self.closing_time:%H:%M}"

    @property
    def full_address(self) -> str:
        parts = [self.address, self.city, self.state, self.zip_code, self.country]
        return ", ".join(p for p in parts if p)
