# hc_core/patients/models.py
from django.conf import settings
from django.db import models

from hc_core.common.display import calculate_age, calculate_bmi
from hc_core.common.models import ResourceModel


class Gender(models.TextChoices):
    MALE = "MALE", "Male"
    FEMALE = "FEMALE", "Female"
    OTHER = "OTHER", "Other"


class BloodType(models.TextChoices):
    A_POS = "A+", "A+"
    A_NEG = "A-", "A-"
    B_POS = "B+", "B+"
    B_NEG = "B-", "B-"
    AB_POS = "AB+", "AB+"
    AB_NEG = "AB-", "AB-"
    O_POS = "O+", "O+"
    O_NEG = "O-", "O-"


class Patient(ResourceModel):
    """
    Shared patient directory. Records, prescriptions and appointments point here.
    """
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32)

    # national identity card number; optional but unique when present
    nic = models.CharField(max_length=12, null=True, blank=True, unique=True)

    date_of_birth = models.DateField()
    gender = models.CharField(max_length=16, choices=Gender.choices)
    blood_type = models.CharField(max_length=3, choices=BloodType.choices, blank=True)
    address = models.CharField(max_length=255, blank=True)

    allergies = models.JSONField(default=list, blank=True)
    height_cm = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    weight_kg = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)

    emergency_contact_name = models.CharField(max_length=100, blank=True)
    emergency_contact_phone = models.CharField(max_length=32, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="patients_created",
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["last_name", "first_name"]),
            models.Index(fields=["phone"]),
        ]

    def __str__(self) -> str:
        return self.full_name

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def age(self) -> int | None:
        return calculate_age(self.date_of_birth)

    @property
    def bmi(self) -> float | None:
        return calculate_bmi(self.height_cm, self.weight_kg)
