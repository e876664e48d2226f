# hc_core/appointments/tests/test_appointments_api.py
from datetime import date, datetime, time, timedelta

import pytest
from django.utils import timezone

from hc_core.appointments.models import Appointment
from hc_core.conftest import client_for

pytestmark = pytest.mark.django_db

URL = "/api/appointments/"


def _future(days=3) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def _payload(patient, **overrides):
    data = {
        "patient": str(patient.id),
        "appointment_date": _future(),
        "appointment_time": "10:30",
        "reason": "Blood pressure review",
    }
    data.update(overrides)
    return data


def test_create_appointment(doctor_client, doctor, patient):
    res = doctor_client.post(URL, _payload(patient), format="json")
    assert res.status_code == 201, res.data

    data = res.json()["data"]
    assert data["appointment_time"] == "10:30"
    assert data["duration"] == 30
    assert data["formatted_duration"] == "30 min"
    assert data["status"] == "SCHEDULED"
    assert data["service_type"] == "CONSULTATION"
    assert data["provider"]["id"] == doctor.id
    assert data["is_upcoming"] is True
    assert data["is_past"] is False


def test_past_date_is_rejected(doctor_client, patient):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    res = doctor_client.post(URL, _payload(patient, appointment_date=yesterday), format="json")
    assert res.status_code == 400
    assert res.json()["fields"]["appointment_date"] == "Appointment date cannot be in the past"


def test_time_and_duration_rules(doctor_client, patient):
    res = doctor_client.post(URL, _payload(patient, appointment_time="25:00", duration=10), format="json")
    assert res.status_code == 400
    fields = res.json()["fields"]
    assert fields["appointment_time"] == "Time must be in HH:MM format"
    assert fields["duration"] == "Duration must be at least 15 minutes"


def test_reason_is_required(doctor_client, patient):
    res = doctor_client.post(URL, _payload(patient, reason="   "), format="json")
    assert res.status_code == 400
    assert res.json()["fields"]["reason"] == "Reason for visit is required"


def test_double_booking_is_a_conflict(doctor_client, patient):
    assert doctor_client.post(URL, _payload(patient), format="json").status_code == 201

    res = doctor_client.post(URL, _payload(patient), format="json")
    assert res.status_code == 409
    assert res.json()["code"] == "slot_taken"
    assert res.json()["error"] == "An appointment already exists with these details"


def test_cancelled_slot_can_be_rebooked(doctor_client, patient):
    aid = doctor_client.post(URL, _payload(patient), format="json").json()["data"]["id"]
    assert doctor_client.patch(f"{URL}{aid}/status/", {"status": "CANCELLED"}, format="json").status_code == 200
    assert doctor_client.post(URL, _payload(patient), format="json").status_code == 201


def test_reschedule_resets_to_scheduled(doctor_client, patient):
    aid = doctor_client.post(URL, _payload(patient), format="json").json()["data"]["id"]
    doctor_client.patch(f"{URL}{aid}/status/", {"status": "CONFIRMED"}, format="json")

    res = doctor_client.patch(f"{URL}{aid}/", {"appointment_time": "14:00"}, format="json")
    assert res.status_code == 200, res.data
    assert res.json()["data"]["appointment_time"] == "14:00"
    assert res.json()["data"]["status"] == "SCHEDULED"


def test_completed_appointment_cannot_move(doctor_client, doctor, patient):
    appt = Appointment.objects.create(
        patient=patient,
        provider=doctor,
        appointment_date=date.today() + timedelta(days=2),
        appointment_time=time(9, 0),
        reason="Check",
        status="COMPLETED",
    )
    res = doctor_client.patch(f"{URL}{appt.id}/", {"appointment_time": "11:00"}, format="json")
    assert res.status_code == 400


def test_notes_can_change_on_old_appointment(doctor_client, doctor, patient):
    appt = Appointment.objects.create(
        patient=patient,
        provider=doctor,
        appointment_date=date(2023, 1, 10),
        appointment_time=time(9, 0),
        reason="Check",
    )
    res = doctor_client.patch(
        f"{URL}{appt.id}/",
        {"appointment_date": "2023-01-10", "notes": "Patient called"},
        format="json",
    )
    assert res.status_code == 200, res.data
    assert res.json()["data"]["notes"] == "Patient called"


def test_provider_scoping(doctor_client, other_doctor, patient):
    aid = doctor_client.post(URL, _payload(patient), format="json").json()["data"]["id"]
    other = client_for(other_doctor)
    assert other.get(f"{URL}{aid}/").status_code == 404
    # other providers have their own calendar
    assert other.post(URL, _payload(patient), format="json").status_code == 201


def test_stats(doctor_client, doctor, patient):
    doctor_client.post(URL, _payload(patient), format="json")
    Appointment.objects.create(
        patient=patient,
        provider=doctor,
        appointment_date=timezone.localdate(),
        appointment_time=time(8, 0),
        reason="Walk-in",
        service_type="VACCINATION",
    )

    data = doctor_client.get(f"{URL}stats/").json()["data"]
    assert data["total"] == 2
    assert data["today"] == 1
    assert data["by_service_type"] == {"CONSULTATION": 1, "VACCINATION": 1}


def test_time_helpers(patient, doctor):
    appt = Appointment(
        patient=patient,
        provider=doctor,
        appointment_date=date(2024, 6, 1),
        appointment_time=time(10, 0),
        duration=90,
    )
    before = timezone.make_aware(datetime(2024, 6, 1, 9, 0))
    after = timezone.make_aware(datetime(2024, 6, 1, 11, 0))

    assert appt.is_today(before) is True
    assert appt.is_upcoming(before) is True
    assert appt.is_past(after) is True
    assert appt.formatted_duration == "1h 30m"
