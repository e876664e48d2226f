# hc_core/appointments/services.py
from __future__ import annotations

from django.core.exceptions import ValidationError

from hc_core.appointments.models import Appointment, AppointmentStatus
from hc_core.appointments.selectors import slot_taken
from hc_core.common.api.exceptions import ConflictError
from hc_core.common.services import ResourceService
from hc_core.common.transitions import StatusMachine

A = AppointmentStatus

APPOINTMENT_STATUS = StatusMachine(
    {
        A.SCHEDULED: {A.CONFIRMED, A.IN_PROGRESS, A.CANCELLED, A.NO_SHOW},
        A.CONFIRMED: {A.SCHEDULED, A.IN_PROGRESS, A.CANCELLED, A.NO_SHOW},
        A.IN_PROGRESS: {A.COMPLETED, A.CANCELLED},
    }
)

SLOT_TAKEN_MSG = "An appointment already exists with these details"


class AppointmentService(ResourceService):
    model = Appointment
    event_prefix = "appointment"
    status_machine = APPOINTMENT_STATUS
    deleted_status = A.CANCELLED
    updatable_fields = frozenset(
        {
            "patient",
            "pharmacy",
            "appointment_date",
            "appointment_time",
            "duration",
            "service_type",
            "status",
            "reason",
            "notes",
        }
    )

    @classmethod
    def prepare_create(cls, *, actor, data: dict) -> dict:
        data["provider"] = actor
        if slot_taken(
            provider=actor,
            appointment_date=data["appointment_date"],
            appointment_time=data["appointment_time"],
        ):
            raise ConflictError(SLOT_TAKEN_MSG, code="slot_taken")
        return data

    @classmethod
    def clean_update(cls, *, instance, updates: dict) -> dict:
        moved = any(
            k in updates and updates[k] != getattr(instance, k)
            for k in ("appointment_date", "appointment_time")
        )
        if not moved:
            return updates

        if not instance.can_be_rescheduled():
            raise ValidationError(
                {"appointment_date": ["Only scheduled or confirmed appointments can be rescheduled"]}
            )
        if slot_taken(
            provider=instance.provider,
            appointment_date=updates.get("appointment_date", instance.appointment_date),
            appointment_time=updates.get("appointment_time", instance.appointment_time),
            exclude_id=instance.pk,
        ):
            raise ConflictError(SLOT_TAKEN_MSG, code="slot_taken")

        # a rescheduled appointment needs confirming again
        updates.setdefault("status", A.SCHEDULED)
        return updates
