# hc_core/client/tests/test_detail_and_forms.py
import uuid
from datetime import date, timedelta

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from hc_core.client.detail_view import ResourceDetailView
from hc_core.client.forms import FORM_ERROR_KEY, FORMS, AppointmentForm, PatientForm, PharmacyForm, PrescriptionForm
from hc_core.patients.models import Patient

pytestmark = pytest.mark.django_db


# ----------------------------
# Detail view
# ----------------------------
def test_detail_loads_entity_and_age(doctor_api, patient):
    view = ResourceDetailView(doctor_api, "patients", today=date(2024, 5, 16))
    assert view.load(patient.id) is True
    assert view.entity["first_name"] == "Amara"
    assert view.age() == 33


@pytest.mark.parametrize("item_id", [None, "", "not-a-uuid", uuid.uuid4()])
def test_detail_not_found_states(doctor_api, item_id):
    view = ResourceDetailView(doctor_api, "patients")
    assert view.load(item_id) is False
    assert view.not_found is True
    assert view.error is None


def test_detail_other_errors_are_kept(pharmacist_api, record):
    view = ResourceDetailView(pharmacist_api, "records")
    assert view.load(record.id) is False
    assert view.not_found is False
    assert view.error == "Forbidden - Doctor access required"


def test_delete_needs_confirmation(doctor_api, doctor_transport, patient):
    view = ResourceDetailView(doctor_api, "patients")
    view.load(patient.id)
    calls = len(doctor_transport.calls)

    assert view.delete() is False
    assert len(doctor_transport.calls) == calls
    assert view.redirect_to is None

    assert view.delete(confirmed=True) is True
    assert view.redirect_to == "/patients"
    patient.refresh_from_db()
    assert patient.is_active is False


def test_download_attachment(settings, tmp_path, doctor_api, record):
    settings.MEDIA_ROOT = tmp_path
    default_storage.save("uploads/records/abc123-report.pdf", ContentFile(b"report body"))
    record.attachments = ["abc123-report.pdf"]
    record.save()

    view = ResourceDetailView(doctor_api, "records")
    view.load(record.id)
    assert view.download_attachment("abc123-report.pdf") == b"report body"
    assert view.download_attachment("../settings.py") is None
    assert view.action_error == "Validation failed"


# ----------------------------
# Forms
# ----------------------------
def test_past_appointment_date_blocks_submit(doctor_api, doctor_transport, patient):
    form = AppointmentForm(doctor_api)
    form.update(
        patient=str(patient.id),
        appointment_date=(date.today() - timedelta(days=1)).isoformat(),
        appointment_time="10:00",
        reason="Review",
    )

    assert form.submit() is False
    assert form.errors["appointment_date"] == "Appointment date cannot be in the past"
    assert doctor_transport.calls == []


def test_appointment_form_time_and_duration(doctor_api):
    form = AppointmentForm(doctor_api, today=date(2024, 1, 1))
    form.update(patient="x", appointment_date="2024-01-02", appointment_time="9am", reason="x", duration=200)
    form.validate()
    assert form.errors == {
        "appointment_time": "Time must be in HH:MM format",
        "duration": "Duration must be between 15 and 120 minutes",
    }


def test_nothing_is_validated_before_submit(doctor_api):
    form = PatientForm(doctor_api)
    form.set("phone", "not a phone")
    assert form.errors == {}


def test_create_patient_round_trip(doctor_api, doctor_transport):
    form = PatientForm(doctor_api)
    form.update(
        first_name="Ruwan",
        last_name="Bandara",
        phone="0712345678",
        date_of_birth="1975-08-20",
        gender="MALE",
    )
    assert form.submit() is True, form.errors
    assert doctor_transport.calls == [("POST", "/patients/")]

    created = Patient.objects.get(first_name="Ruwan")
    assert form.redirect_to == f"/patients/{created.id}"
    assert form.result["full_name"] == "Ruwan Bandara"


ROUND_TRIP_DRAFTS = {
    "patients": lambda f: {
        "first_name": "Ruwan",
        "last_name": "Bandara",
        "email": "ruwan@example.com",
        "phone": "0712345678",
        "nic": "197512345678",
        "date_of_birth": "1975-08-20",
        "gender": "MALE",
        "blood_type": "A+",
        "address": "21 Hill Street, Kandy",
        "allergies": ["Penicillin"],
        "emergency_contact_name": "Nilmini Bandara",
        "emergency_contact_phone": "0771234567",
    },
    "records": lambda f: {
        "patient": str(f["patient"].id),
        "record_type": "CONSULTATION",
        "title": "Seasonal asthma",
        "description": "Wheeze on exertion",
        "date": "2024-02-10",
        "status": "ACTIVE",
        "doctor_notes": "Review in three months",
    },
    "prescriptions": lambda f: {
        "patient": str(f["patient"].id),
        "diagnosis": "Hypertension",
        "medications": [
            {
                "name": "Amlodipine",
                "dosage": "5mg",
                "frequency": "once daily",
                "duration": "30 days",
                "instructions": "After breakfast",
                "quantity": 30,
                "refills": 2,
            }
        ],
        "notes": "Check BP weekly",
        "start_date": "2024-04-01",
        "end_date": "2024-05-01",
        "status": "ACTIVE",
    },
    "appointments": lambda f: {
        "patient": str(f["patient"].id),
        "pharmacy": str(f["pharmacy"].id),
        "appointment_date": (date.today() + timedelta(days=7)).isoformat(),
        "appointment_time": "10:30",
        "duration": 45,
        "service_type": "CONSULTATION",
        "reason": "Follow-up",
        "notes": "Bring previous reports",
    },
    "pharmacies": lambda f: {
        "name": "Harbour Pharmacy",
        "address": "8 Harbour Road",
        "city": "Galle",
        "state": "Southern",
        "zip_code": "80000",
        "country": "Sri Lanka",
        "phone": "0912223344",
        "email": "harbour@example.com",
        "website": "https://harbour.example.com",
        "pharmacist_name": "S. Fernando",
        "license_number": "PH-0900",
        "opening_time": "09:00",
        "closing_time": "18:00",
        "is_24_hours": False,
        "closed_days": ["sunday"],
        "services": ["Delivery"],
        "description": "Near the bus stand",
    },
    "products": lambda f: {
        "pharmacy": str(f["pharmacy"].id),
        "name": "Vitamin C 1000mg",
        "description": "Effervescent tablets",
        "category": "Vitamins",
        "manufacturer": "Acme Labs",
        "price": "120.50",
        "cost_price": "80.00",
        "stock_quantity": 40,
        "min_stock_level": 5,
        "sku": "VITC-1000",
        "requires_prescription": False,
        "expiry_date": (date.today() + timedelta(days=365)).isoformat(),
    },
}

ROUND_TRIP_API = {
    "patients": "doctor_api",
    "records": "doctor_api",
    "prescriptions": "doctor_api",
    "appointments": "doctor_api",
    "pharmacies": "pharmacist_api",
    "products": "pharmacist_api",
}


@pytest.mark.parametrize("resource", sorted(ROUND_TRIP_DRAFTS))
def test_form_fields_survive_create_then_fetch(request, resource, patient, pharmacy):
    api = request.getfixturevalue(ROUND_TRIP_API[resource])
    form = FORMS[resource](api)
    form.update(**ROUND_TRIP_DRAFTS[resource]({"patient": patient, "pharmacy": pharmacy}))
    assert set(form.fields) <= set(form.draft)

    assert form.submit() is True, form.errors

    view = ResourceDetailView(api, resource)
    assert view.load(form.instance_id) is True
    for name in form.fields:
        got = view.entity[name]
        if isinstance(got, dict):
            got = got["id"]
        assert got == form.draft[name], name


def test_edit_form_puts_changes(doctor_api, doctor_transport, patient):
    view = ResourceDetailView(doctor_api, "patients")
    view.load(patient.id)

    form = view.edit_form()
    assert form.is_edit
    assert form.draft["first_name"] == "Amara"

    form.set("address", "9 Flower Road")
    assert form.submit() is True, form.errors
    assert doctor_transport.calls[-1] == ("PUT", f"/patients/{patient.id}/")

    patient.refresh_from_db()
    assert patient.address == "9 Flower Road"
    assert form.redirect_to == f"/patients/{patient.id}"


def test_server_field_errors_are_merged(doctor_api):
    form = PrescriptionForm(doctor_api)
    form.update(
        patient=str(uuid.uuid4()),
        diagnosis="Migraine",
        medications=[{"name": "Sumatriptan", "dosage": "50mg", "frequency": "prn", "duration": "3 days"}],
    )
    assert form.submit() is False
    assert form.errors[FORM_ERROR_KEY] == "Validation failed"
    assert form.errors["patient"] == "Patient not found"
    # the draft survives for another attempt
    assert form.draft["diagnosis"] == "Migraine"


def test_prescription_form_checks_each_medication(doctor_api, doctor_transport):
    form = PrescriptionForm(doctor_api)
    form.update(patient="p", diagnosis="Cough", medications=[{"name": "Syrup"}])
    assert form.submit() is False
    assert form.errors["medications"] == "Medication 1: dosage, frequency, duration required"
    assert doctor_transport.calls == []


def test_pharmacy_form_hours(pharmacist_api):
    form = PharmacyForm(pharmacist_api)
    form.update(
        name="Night Owl",
        address="3 Station Road",
        city="Matara",
        phone="0412222333",
        license_number="PH-0777",
        opening_time="18:00",
        closing_time="09:00",
    )
    assert form.submit() is False
    assert form.errors == {"closing_time": "Opening time must be before closing time"}

    form.update(opening_time="09:00", closing_time="18:00")
    assert form.submit() is True, form.errors
    assert form.redirect_to.startswith("/pharmacies/")
