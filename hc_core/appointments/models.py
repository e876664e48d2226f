# hc_core/appointments/models.py
from __future__ import annotations

from datetime import datetime

from django.conf import settings
from django.db import models
from django.utils import timezone

from hc_core.common.display import format_duration
from hc_core.common.models import ResourceModel


class ServiceType(models.TextChoices):
    CONSULTATION = "CONSULTATION", "Consultation"
    MEDICATION_REVIEW = "MEDICATION_REVIEW", "Medication review"
    CHRONIC_DISEASE_MANAGEMENT = "CHRONIC_DISEASE_MANAGEMENT", "Chronic disease management"
    VACCINATION = "VACCINATION", "Vaccination"
    HEALTH_SCREENING = "HEALTH_SCREENING", "Health screening"
    PRESCRIPTION_CONSULTATION = "PRESCRIPTION_CONSULTATION", "Prescription consultation"
    OTHER = "OTHER", "Other"


class AppointmentStatus(models.TextChoices):
    SCHEDULED = "SCHEDULED", "Scheduled"
    CONFIRMED = "CONFIRMED", "Confirmed"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"
    NO_SHOW = "NO_SHOW", "No show"


OPEN_STATUSES = (AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED)


class Appointment(ResourceModel):
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="appointments")
    # doctor or pharmacist running the appointment
    provider = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="appointments")
    pharmacy = models.ForeignKey(
        "pharmacies.Pharmacy",
        on_delete=models.SET_NULL,
        related_name="appointments",
        null=True,
        blank=True,
    )

    appointment_date = models.DateField(db_index=True)
    appointment_time = models.TimeField()
    duration = models.PositiveSmallIntegerField(default=30)  # minutes, 15..120

    service_type = models.CharField(max_length=32, choices=ServiceType.choices, default=ServiceType.CONSULTATION)
    status = models.CharField(
        max_length=16,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED,
        db_index=True,
    )

    reason = models.CharField(max_length=500)
    notes = models.TextField(max_length=1000, blank=True)

    class Meta:
        db_table = "appointments_appointment"
        indexes = [
            models.Index(fields=["provider", "appointment_date", "appointment_time"]),
            models.Index(fields=["patient", "appointment_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.patient} @ {self.appointment_date} {self.appointment_time:%H:%M}"

    def starts_at(self) -> datetime:
        return timezone.make_aware(datetime.combine(self.appointment_date, self.appointment_time))

    def is_today(self, now: datetime | None = None) -> bool:
        now = now or timezone.localtime()
        return self.appointment_date == now.date()

    def is_past(self, now: datetime | None = None) -> bool:
        return self.starts_at() < (now or timezone.now())

    def is_upcoming(self, now: datetime | None = None) -> bool:
        return self.starts_at() > (now or timezone.now()) and self.status == AppointmentStatus.SCHEDULED

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration)

    def can_be_rescheduled(self) -> bool:
        return self.status in OPEN_STATUSES
