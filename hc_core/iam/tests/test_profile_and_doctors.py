from datetime import date, time

import pytest

from hc_core.appointments.models import Appointment
from hc_core.audit.models import AuditEvent
from hc_core.iam.models import UserProfile

pytestmark = pytest.mark.django_db

DOCTORS = "/api/doctors/"


def _work(user, days, start=None, end=None, **extra):
    UserProfile.objects.filter(user=user).update(
        available_days=days,
        available_from=start,
        available_to=end,
        **extra,
    )


# ----------------------------
# /me/ profile edits
# ----------------------------
def test_patch_me_updates_user_and_profile(doctor_client, doctor):
    res = doctor_client.patch(
        "/api/me/",
        {
            "first_name": "  Nimal ",
            "phone": "+94 77 555 0101",
            "specialization": "Cardiology",
            "available_days": ["Friday", "monday", "monday"],
            "available_from": "08:00",
            "available_to": "12:30",
        },
        format="json",
    )
    assert res.status_code == 200, res.data

    body = res.json()
    assert body["user"]["first_name"] == "Nimal"
    assert body["profile"]["phone"] == "+94 77 555 0101"
    assert body["profile"]["available_days"] == ["monday", "friday"]
    assert body["profile"]["available_to"] == "12:30"

    profile = UserProfile.objects.get(user=doctor)
    assert profile.specialization == "Cardiology"
    assert AuditEvent.objects.filter(event_code="profile.updated", entity_id=profile.id).count() == 1


def test_put_me_with_same_values_writes_nothing(doctor_client, doctor):
    doctor_client.put("/api/me/", {"address": "4 Lake Road"}, format="json")
    doctor_client.put("/api/me/", {"address": "4 Lake Road"}, format="json")
    assert AuditEvent.objects.filter(event_code="profile.updated").count() == 1


@pytest.mark.parametrize(
    "payload, field, message",
    [
        ({"first_name": "N"}, "first_name", "Name must be between 2 and 100 characters"),
        ({"last_name": "x" * 101}, "last_name", "Name must be between 2 and 100 characters"),
        ({"phone": "call me"}, "phone", "Please enter a valid phone number"),
        ({"available_days": ["someday"]}, "available_days", "Unknown weekday: someday"),
        (
            {"available_from": "17:00", "available_to": "09:00"},
            "available_to",
            "Available from must be before available to",
        ),
    ],
)
def test_profile_validation(doctor_client, payload, field, message):
    res = doctor_client.patch("/api/me/", payload, format="json")
    assert res.status_code == 400
    assert res.json()["fields"][field] == message


def test_profile_needs_login(client):
    res = client.patch("/api/me/", {"first_name": "Ghost"}, content_type="application/json")
    assert res.status_code == 401


# ----------------------------
# Doctor directory
# ----------------------------
def test_directory_lists_doctors_only(patient_client, doctor, other_doctor, pharmacist):
    _work(doctor, [], specialization="Cardiology", department="Medicine")
    _work(other_doctor, [], specialization="Dermatology", department="Skin")

    res = patient_client.get(DOCTORS)
    assert res.status_code == 200
    body = res.json()
    assert [d["username"] for d in body["data"]] == ["dr_perera", "dr_silva"]
    assert body["pagination"]["total"] == 2

    res = patient_client.get(DOCTORS, {"specialization": "cardio"})
    assert [d["username"] for d in res.json()["data"]] == ["dr_silva"]

    res = patient_client.get(DOCTORS, {"search": "skin"})
    assert [d["username"] for d in res.json()["data"]] == ["dr_perera"]


def test_retrieve_doctor(pharmacist_client, doctor, pharmacist):
    assert pharmacist_client.get(f"{DOCTORS}{doctor.id}/").json()["data"]["full_name"] == "Nimal Silva"
    assert pharmacist_client.get(f"{DOCTORS}{pharmacist.id}/").status_code == 404
    assert pharmacist_client.get(f"{DOCTORS}abc/").status_code == 404


def test_available_by_day_time_and_specialization(patient_client, doctor, other_doctor):
    _work(doctor, ["monday", "wednesday"], time(9, 0), time(13, 0), specialization="Cardiology")
    _work(other_doctor, ["monday"], time(14, 0), time(18, 0), specialization="Dermatology")

    def names(**params):
        res = patient_client.get(f"{DOCTORS}available/", params)
        assert res.status_code == 200, res.data
        return [d["username"] for d in res.json()["data"]]

    assert names(day="Monday") == ["dr_perera", "dr_silva"]
    assert names(day="monday", time="10:00") == ["dr_silva"]
    assert names(day="monday", time="13:00") == []
    assert names(day="wednesday") == ["dr_silva"]
    assert names(day="monday", specialization="derm") == ["dr_perera"]
    assert names(day="monday", limit=1) == ["dr_perera"]


def test_available_skips_booked_slot(patient_client, doctor, patient):
    _work(doctor, ["monday"], time(9, 0), time(13, 0))
    monday = date(2024, 6, 3)
    params = {"date": monday.isoformat(), "time": "10:00"}

    assert len(patient_client.get(f"{DOCTORS}available/", params).json()["data"]) == 1

    Appointment.objects.create(
        patient=patient,
        provider=doctor,
        appointment_date=monday,
        appointment_time=time(10, 0),
        reason="Chest pain",
    )
    assert patient_client.get(f"{DOCTORS}available/", params).json()["data"] == []
    # a different slot the same day is still free
    assert len(patient_client.get(f"{DOCTORS}available/", {**params, "time": "11:00"}).json()["data"]) == 1


@pytest.mark.parametrize(
    "params, field",
    [({"day": "funday"}, "day"), ({"time": "9am"}, "time"), ({"date": "03/06/2024"}, "date")],
)
def test_available_rejects_bad_params(patient_client, params, field):
    res = patient_client.get(f"{DOCTORS}available/", params)
    assert res.status_code == 400
    assert field in res.json()["fields"]
