# hc_core/client/forms.py
"""
Create / edit forms.

A form keeps a draft dict. Nothing is validated while the draft is edited;
`submit()` runs every check, and only a clean draft is sent (POST for a new
entity, PUT for an existing one). Server rejections land in `errors`
(`errors["_form"]` for the top-level message) and the draft is kept.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

from hc_core.client.transport import ApiClient, ApiError
from hc_core.common.validators import (
    medication_errors,
    phone_error,
    required_error,
    time_format_error,
    time_range_error,
    not_future_error,
    not_past_error,
)

logger = logging.getLogger(__name__)

FORM_ERROR_KEY = "_form"


def _ref_id(value: Any) -> Any:
    # expanded references ({"id": ..., ...}) are sent back as their id
    if isinstance(value, Mapping) and "id" in value:
        return value["id"]
    return value


class MutationForm:
    resource: str = ""
    # field -> label used in "<label> is required"
    required_fields: dict[str, str] = {}
    # fields sent to the API; anything else in the draft stays local
    fields: tuple[str, ...] = ()
    defaults: dict[str, Any] = {}

    def __init__(self, client: ApiClient, initial: Mapping[str, Any] | None = None, *, today: date | None = None):
        self.client = client
        self.today = today
        self.instance_id = (initial or {}).get("id")

        self.draft: dict[str, Any] = {**self.defaults}
        for name in self.fields:
            if initial is not None and name in initial:
                self.draft[name] = _ref_id(initial[name])

        self.errors: dict[str, str] = {}
        self.result: dict | None = None
        self.redirect_to: str | None = None
        self.submitting = False

    @property
    def is_edit(self) -> bool:
        return self.instance_id is not None

    def set(self, name: str, value: Any) -> None:
        self.draft[name] = value

    def update(self, **values: Any) -> None:
        self.draft.update(values)

    # ----------------------------
    # Validation
    # ----------------------------
    def clean(self, draft: dict[str, Any]) -> dict[str, str]:
        """Per-form rules on top of required fields."""
        return {}

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        for name, label in self.required_fields.items():
            err = required_error(self.draft.get(name), label)
            if err:
                errors[name] = err

        for name, msg in self.clean(self.draft).items():
            errors.setdefault(name, msg)

        self.errors = errors
        return errors

    def payload(self) -> dict[str, Any]:
        return {name: _ref_id(self.draft[name]) for name in self.fields if name in self.draft}

    # ----------------------------
    # Submit
    # ----------------------------
    def submit(self) -> bool:
        if self.validate():
            return False

        self.submitting = True
        try:
            if self.is_edit:
                body = self.client.put(f"/{self.resource}/{self.instance_id}/", self.payload())
            else:
                body = self.client.post(f"/{self.resource}/", self.payload())
        except ApiError as e:
            logger.info("%s form rejected: %s", self.resource, e.message)
            self.errors = {**e.fields, FORM_ERROR_KEY: e.message}
            return False
        finally:
            self.submitting = False

        self.result = body.get("data") or {}
        self.instance_id = self.result.get("id", self.instance_id)
        self.redirect_to = f"/{self.resource}/{self.instance_id}"
        return True


class PatientForm(MutationForm):
    resource = "patients"
    required_fields = {
        "first_name": "First name",
        "last_name": "Last name",
        "phone": "Phone",
        "date_of_birth": "Date of birth",
        "gender": "Gender",
    }
    fields = (
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
        "emergency_contact_name",
        "emergency_contact_phone",
    )

    def clean(self, draft):
        errors = {}
        for name in ("phone", "emergency_contact_phone"):
            err = phone_error(draft.get(name))
            if err:
                errors[name] = err
        err = not_future_error(draft.get("date_of_birth"), today=self.today, label="Date of birth")
        if err:
            errors["date_of_birth"] = err
        return errors


class MedicalRecordForm(MutationForm):
    resource = "records"
    required_fields = {
        "patient": "Patient",
        "record_type": "Record type",
        "title": "Title",
        "date": "Date",
    }
    fields = ("patient", "record_type", "title", "description", "date", "status", "doctor_notes")
    defaults = {"status": "ACTIVE"}

    def clean(self, draft):
        err = not_future_error(draft.get("date"), today=self.today, label="Date")
        return {"date": err} if err else {}


class PrescriptionForm(MutationForm):
    resource = "prescriptions"
    required_fields = {
        "patient": "Patient",
        "diagnosis": "Diagnosis",
        "medications": "At least one medication",
    }
    fields = ("patient", "diagnosis", "medications", "notes", "start_date", "end_date", "status")

    def clean(self, draft):
        meds = medication_errors(draft.get("medications"))
        return {"medications": "; ".join(meds)} if meds else {}


class AppointmentForm(MutationForm):
    resource = "appointments"
    required_fields = {
        "patient": "Patient",
        "appointment_date": "Appointment date",
        "appointment_time": "Appointment time",
        "reason": "Reason for visit",
    }
    fields = (
        "patient",
        "pharmacy",
        "appointment_date",
        "appointment_time",
        "duration",
        "service_type",
        "reason",
        "notes",
    )
    defaults = {"duration": 30, "service_type": "CONSULTATION"}

    def __init__(self, client, initial=None, *, today=None):
        super().__init__(client, initial, today=today)
        self._original_date = (initial or {}).get("appointment_date")

    def clean(self, draft):
        errors = {}
        appointment_date = draft.get("appointment_date")
        # an existing appointment may keep its (now past) date
        if not (self.is_edit and appointment_date == self._original_date):
            err = not_past_error(appointment_date, today=self.today, label="Appointment date")
            if err:
                errors["appointment_date"] = err

        err = time_format_error(draft.get("appointment_time"))
        if err:
            errors["appointment_time"] = err

        duration = draft.get("duration")
        if duration not in (None, ""):
            try:
                if not 15 <= int(duration) <= 120:
                    errors["duration"] = "Duration must be between 15 and 120 minutes"
            except (TypeError, ValueError):
                errors["duration"] = "Duration must be a number"
        return errors


class PharmacyForm(MutationForm):
    resource = "pharmacies"
    required_fields = {
        "name": "Pharmacy name",
        "address": "Address",
        "city": "City",
        "phone": "Phone",
        "license_number": "License number",
    }
    fields = (
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
    )
    defaults = {"is_24_hours": False}

    def clean(self, draft):
        errors = {}
        err = phone_error(draft.get("phone"))
        if err:
            errors["phone"] = err

        if not draft.get("is_24_hours"):
            for name, label in (("opening_time", "Opening time"), ("closing_time", "Closing time")):
                err = required_error(draft.get(name), label) or time_format_error(draft.get(name))
                if err:
                    errors[name] = err
            if not errors.get("opening_time") and not errors.get("closing_time"):
                err = time_range_error(draft.get("opening_time"), draft.get("closing_time"))
                if err:
                    errors["closing_time"] = err
        return errors


class ProductForm(MutationForm):
    resource = "products"
    required_fields = {
        "pharmacy": "Pharmacy",
        "name": "Product name",
        "category": "Category",
        "price": "Price",
        "sku": "SKU",
    }
    fields = (
        "pharmacy",
        "name",
        "description",
        "category",
        "manufacturer",
        "price",
        "cost_price",
        "stock_quantity",
        "min_stock_level",
        "sku",
        "requires_prescription",
        "expiry_date",
    )

    def clean(self, draft):
        price = draft.get("price")
        if price not in (None, ""):
            try:
                if float(price) <= 0:
                    return {"price": "Price must be greater than 0"}
            except (TypeError, ValueError):
                return {"price": "Price must be a number"}
        return {}

    def payload(self):
        data = super().payload()
        # pharmacy is fixed once the product exists
        if self.is_edit:
            data.pop("pharmacy", None)
        return data


FORMS: dict[str, type[MutationForm]] = {
    form.resource: form
    for form in (PatientForm, MedicalRecordForm, PrescriptionForm, AppointmentForm, PharmacyForm, ProductForm)
}
