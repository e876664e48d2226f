# hc_core/patients/services.py
from __future__ import annotations

from hc_core.common.services import ResourceService
from hc_core.patients.models import Patient


class PatientService(ResourceService):
    model = Patient
    event_prefix = "patient"
    unique_error = "A patient with this NIC already exists"
    updatable_fields = frozenset(
        {
            "first_name",
            "last_name",
            "email",
            "phone",
            "nic",
            "date_of_birth",
            "gender",
            "blood_type",
            "address",
            "allergies",
            "height_cm",
            "weight_kg",
            "emergency_contact_name",
            "emergency_contact_phone",
        }
    )

    @classmethod
    def prepare_create(cls, *, actor, data: dict) -> dict:
        data["created_by"] = actor
        return data
