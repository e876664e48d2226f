# hc_core/pharmacies/services.py
from __future__ import annotations

from django.core.exceptions import ValidationError

from hc_core.common.services import ResourceService
from hc_core.common.transitions import StatusMachine
from hc_core.common.validators import HOURS_ORDER_MSG, HOURS_REQUIRED_MSG, time_range_error
from hc_core.pharmacies.models import Pharmacy, PharmacyStatus

S = PharmacyStatus

HOURS_FIELDS = {"is_24_hours", "opening_time", "closing_time"}

PHARMACY_STATUS = StatusMachine(
    {
        S.ACTIVE: {S.INACTIVE, S.MAINTENANCE},
        S.INACTIVE: {S.ACTIVE, S.MAINTENANCE},
        S.MAINTENANCE: {S.ACTIVE, S.INACTIVE},
    }
)


class PharmacyService(ResourceService):
    model = Pharmacy
    event_prefix = "pharmacy"
    status_machine = PHARMACY_STATUS
    deleted_status = S.INACTIVE
    unique_error = "A pharmacy with this license number already exists"
    updatable_fields = frozenset(
        {
            "name",
            "address",
            "city",
            "state",
            "zip_code",
            "country",
            "phone",
            "email",
            "website",
            "pharmacist_name",
            "license_number",
            "opening_time",
            "closing_time",
            "is_24_hours",
            "closed_days",
            "services",
            "description",
            "status",
        }
    )

    @classmethod
    def prepare_create(cls, *, actor, data: dict) -> dict:
        data["created_by"] = actor
        return data

    @classmethod
    def clean_update(cls, *, instance, updates: dict) -> dict:
        # Check the merged state: a PATCH may move one end of the hours, or drop 24h.
        if HOURS_FIELDS.isdisjoint(updates):
            return updates
        if updates.get("is_24_hours", instance.is_24_hours):
            return updates

        opening = updates.get("opening_time", instance.opening_time)
        closing = updates.get("closing_time", instance.closing_time)
        if opening is None or closing is None:
            raise ValidationError({"opening_time": [HOURS_REQUIRED_MSG]})
        if time_range_error(opening, closing):
            raise ValidationError({"closing_time": [HOURS_ORDER_MSG]})
        return updates
