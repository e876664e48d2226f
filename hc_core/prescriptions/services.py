# hc_core/prescriptions/services.py
from __future__ import annotations

from django.core.exceptions import ValidationError

from hc_core.common.services import ResourceService
from hc_core.common.transitions import StatusMachine
from hc_core.prescriptions.models import Prescription, PrescriptionStatus, end_date_from_medications
from hc_core.prescriptions.selectors import next_prescription_number

P = PrescriptionStatus

PRESCRIPTION_STATUS = StatusMachine(
    {
        P.ACTIVE: {P.COMPLETED, P.CANCELLED},
    }
)


class PrescriptionService(ResourceService):
    model = Prescription
    event_prefix = "prescription"
    status_machine = PRESCRIPTION_STATUS
    deleted_status = P.CANCELLED
    unique_error = "Prescription number already issued, please retry"
    updatable_fields = frozenset(
        {"patient", "diagnosis", "medications", "notes", "start_date", "end_date", "status"}
    )

    @classmethod
    def prepare_create(cls, *, actor, data: dict) -> dict:
        data["doctor"] = actor
        data["prescription_number"] = next_prescription_number()
        if not data.get("end_date"):
            data["end_date"] = end_date_from_medications(data.get("start_date"), data.get("medications"))
        return data

    @classmethod
    def clean_update(cls, *, instance, updates: dict) -> dict:
        start = updates.get("start_date", instance.start_date)
        end = updates.get("end_date", instance.end_date)

        if "medications" in updates and not end:
            end = end_date_from_medications(start, updates["medications"])
            if end:
                updates["end_date"] = end

        if end and start and end <= start:
            raise ValidationError({"end_date": ["End date must be after start date"]})
        return updates
