# hc_core/patients/tests/test_patients_api.py
import uuid

import pytest

from hc_core.audit.models import AuditEvent
from hc_core.patients.models import Patient

pytestmark = pytest.mark.django_db

URL = "/api/patients/"


def _payload(**overrides):
    data = {
        "first_name": "Saman",
        "last_name": "Kumara",
        "phone": "+94 71 555 0101",
        "date_of_birth": "1985-02-10",
        "gender": "MALE",
        "nic": "850411234v",
    }
    data.update(overrides)
    return data


def test_create_patient_returns_envelope(doctor_client, doctor):
    res = doctor_client.post(URL, _payload(), format="json")
    assert res.status_code == 201, res.data

    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Patient created successfully"
    assert body["data"]["nic"] == "850411234V"
    assert body["data"]["full_name"] == "Saman Kumara"

    patient = Patient.objects.get(pk=body["data"]["id"])
    assert patient.created_by_id == doctor.id
    assert AuditEvent.objects.filter(event_code="patient.created", entity_id=patient.id).exists()


def test_create_patient_validation_envelope(doctor_client):
    res = doctor_client.post(URL, _payload(first_name="S", phone="call me"), format="json")
    assert res.status_code == 400

    body = res.json()
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    assert body["code"] == "validation_error"
    assert body["fields"]["first_name"] == "First name must be at least 2 characters"
    assert body["fields"]["phone"] == "Please enter a valid phone number"
    assert "request_id" in body


def test_duplicate_nic_is_rejected(doctor_client, patient):
    res = doctor_client.post(URL, _payload(nic=patient.nic), format="json")
    assert res.status_code == 400
    assert "A patient with this NIC already exists" in res.json()["details"]


def test_list_is_paginated_and_searchable(doctor_client, patient):
    doctor_client.post(URL, _payload(), format="json")

    res = doctor_client.get(URL, {"limit": 1})
    assert res.status_code == 200
    body = res.json()
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}
    assert len(body["data"]) == 1

    res = doctor_client.get(URL, {"search": "wickram"})
    assert [p["id"] for p in res.json()["data"]] == [str(patient.id)]


def test_retrieve_unknown_and_malformed_ids(doctor_client):
    res = doctor_client.get(f"{URL}{uuid.uuid4()}/")
    assert res.status_code == 404
    assert res.json()["error"] == "Patient not found"

    res = doctor_client.get(f"{URL}not-a-uuid/")
    assert res.status_code == 400
    assert res.json()["code"] == "invalid_id"


def test_put_merges_and_repeating_it_is_a_noop(doctor_client, patient):
    url = f"{URL}{patient.id}/"
    res = doctor_client.put(url, {"address": "5 Temple Road, Kandy"}, format="json")
    assert res.status_code == 200, res.data
    assert res.json()["data"]["address"] == "5 Temple Road, Kandy"
    # untouched fields survive a partial PUT
    assert res.json()["data"]["first_name"] == "Amara"

    again = doctor_client.put(url, {"address": "5 Temple Road, Kandy"}, format="json")
    assert again.status_code == 200
    assert again.json()["data"] == res.json()["data"]
    assert AuditEvent.objects.filter(event_code="patient.updated", entity_id=patient.id).count() == 1


def test_empty_update_is_rejected(doctor_client, patient):
    res = doctor_client.patch(f"{URL}{patient.id}/", {}, format="json")
    assert res.status_code == 400


def test_soft_delete_hides_from_list_but_not_lookup(doctor_client, patient):
    url = f"{URL}{patient.id}/"
    res = doctor_client.delete(url)
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Patient deleted successfully"}

    patient.refresh_from_db()
    assert patient.is_active is False

    listed = doctor_client.get(URL).json()["data"]
    assert str(patient.id) not in [p["id"] for p in listed]

    assert doctor_client.get(url).status_code == 200
    assert doctor_client.patch(url, {"address": "x"}, format="json").status_code == 404
    assert doctor_client.delete(url).status_code == 404


def test_search_by_nic(doctor_client, patient):
    res = doctor_client.get(f"{URL}search/", {"nic": patient.nic})
    assert res.status_code == 200
    assert res.json()["data"]["id"] == str(patient.id)

    assert doctor_client.get(f"{URL}search/", {"nic": "000000000V"}).status_code == 404
    assert doctor_client.get(f"{URL}search/").status_code == 400


def test_stats(doctor_client, patient):
    res = doctor_client.get(f"{URL}stats/")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total"] == 1
    assert data["by_gender"] == {"FEMALE": 1}
    assert data["by_blood_type"] == {"O+": 1}


def test_patient_role_cannot_read_directory(patient_client):
    res = patient_client.get(URL)
    assert res.status_code == 403
    assert res.json()["code"] == "permission_denied"


def test_pharmacist_cannot_update(pharmacist_client, patient):
    res = pharmacist_client.patch(f"{URL}{patient.id}/", {"address": "x"}, format="json")
    assert res.status_code == 403
