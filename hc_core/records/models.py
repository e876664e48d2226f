# hc_core/records/models.py
from django.conf import settings
from django.db import models

from hc_core.common.models import ResourceModel


class RecordType(models.TextChoices):
    CONSULTATION = "CONSULTATION", "Consultation"
    LAB_RESULT = "LAB_RESULT", "Lab result"
    IMAGING = "IMAGING", "Imaging"
    ECG = "ECG", "ECG"
    PRESCRIPTION = "PRESCRIPTION", "Prescription"
    PROGRESS_NOTE = "PROGRESS_NOTE", "Progress note"
    SURGICAL_REPORT = "SURGICAL_REPORT", "Surgical report"
    DISCHARGE_SUMMARY = "DISCHARGE_SUMMARY", "Discharge summary"
    OTHER = "OTHER", "Other"


class RecordStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    COMPLETED = "COMPLETED", "Completed"
    ARCHIVED = "ARCHIVED", "Archived"


class MedicalRecord(ResourceModel):
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="medical_records")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="medical_records")

    record_type = models.CharField(max_length=32, choices=RecordType.choices, db_index=True)
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=1000, blank=True)
    date = models.DateField(db_index=True)

    status = models.CharField(
        max_length=16,
        choices=RecordStatus.choices,
        default=RecordStatus.ACTIVE,
        db_index=True,
    )

    # stored file names under MEDIA_ROOT/<HC_RECORD_UPLOAD_DIR>/
    attachments = models.JSONField(default=list, blank=True)
    doctor_notes = models.TextField(max_length=2000, blank=True)

    class Meta:
        db_table = "records_medical_record"
        indexes = [
            models.Index(fields=["doctor", "date"]),
            models.Index(fields=["patient", "date"]),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.record_type})"
