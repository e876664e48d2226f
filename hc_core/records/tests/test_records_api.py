# hc_core/records/tests/test_records_api.py
from datetime import date, timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from hc_core.conftest import client_for
from hc_core.records.models import MedicalRecord

pytestmark = pytest.mark.django_db

URL = "/api/records/"


@pytest.fixture
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path
    return tmp_path


def _payload(patient, **overrides):
    data = {
        "patient": str(patient.id),
        "record_type": "CONSULTATION",
        "title": "Follow-up visit",
        "date": "2024-04-02",
    }
    data.update(overrides)
    return data


def test_create_record_sets_doctor_and_expands_refs(doctor_client, doctor, patient):
    res = doctor_client.post(URL, _payload(patient), format="json")
    assert res.status_code == 201, res.data

    data = res.json()["data"]
    assert data["status"] == "ACTIVE"
    assert data["patient"]["id"] == str(patient.id)
    assert data["patient"]["first_name"] == "Amara"
    assert data["doctor"]["id"] == doctor.id
    assert data["attachments"] == []


def test_create_record_required_messages(doctor_client):
    res = doctor_client.post(URL, {}, format="json")
    assert res.status_code == 400
    fields = res.json()["fields"]
    assert fields["patient"] == "Patient is required"
    assert fields["title"] == "Title is required"
    assert fields["record_type"] == "Record type is required"


def test_record_date_cannot_be_in_future(doctor_client, patient):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    res = doctor_client.post(URL, _payload(patient, date=tomorrow), format="json")
    assert res.status_code == 400
    assert res.json()["fields"]["date"] == "Date cannot be in the future"


def test_list_filter_by_status(doctor_client, doctor, patient, record):
    MedicalRecord.objects.create(
        patient=patient,
        doctor=doctor,
        record_type="IMAGING",
        title="Chest X-ray",
        date=date(2024, 3, 5),
        status="COMPLETED",
    )

    res = doctor_client.get(URL, {"status": "ACTIVE"})
    assert res.status_code == 200
    rows = res.json()["data"]
    assert [r["id"] for r in rows] == [str(record.id)]
    assert rows[0]["record_type"] == "LAB_RESULT"


def test_other_doctor_cannot_see_record(other_doctor, record):
    c = client_for(other_doctor)
    assert c.get(URL).json()["data"] == []
    assert c.get(f"{URL}{record.id}/").status_code == 404
    assert c.delete(f"{URL}{record.id}/").status_code == 404


def test_pharmacist_forbidden(pharmacist_client):
    res = pharmacist_client.get(URL)
    assert res.status_code == 403
    assert res.json()["error"] == "Forbidden - Doctor access required"


def test_status_transitions(doctor_client, record):
    url = f"{URL}{record.id}/status/"
    res = doctor_client.patch(url, {"status": "ARCHIVED"}, format="json")
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "ARCHIVED"

    res = doctor_client.patch(url, {"status": "COMPLETED"}, format="json")
    assert res.status_code == 409
    body = res.json()
    assert body["code"] == "invalid_transition"
    assert body["error"] == "Cannot change status from ARCHIVED to COMPLETED"

    record.refresh_from_db()
    assert record.status == "ARCHIVED"


def test_unknown_status_is_a_validation_error(doctor_client, record):
    res = doctor_client.patch(f"{URL}{record.id}/status/", {"status": "LOST"}, format="json")
    assert res.status_code == 400


def test_upload_and_download_attachment(media_root, doctor_client, patient, other_doctor):
    upload = SimpleUploadedFile("blood test.pdf", b"%PDF-1.4 result", content_type="application/pdf")
    res = doctor_client.post(URL, {**_payload(patient), "attachments": [upload]}, format="multipart")
    assert res.status_code == 201, res.data

    attachments = res.json()["data"]["attachments"]
    assert len(attachments) == 1
    name = attachments[0]
    assert name.endswith("blood_test.pdf")

    dl = doctor_client.get(f"{URL}download/", {"filename": name})
    assert dl.status_code == 200
    assert b"".join(dl.streaming_content) == b"%PDF-1.4 result"
    assert "attachment" in dl["Content-Disposition"]

    # not one of the other doctor's records
    assert client_for(other_doctor).get(f"{URL}download/", {"filename": name}).status_code == 404


@pytest.mark.parametrize("filename", ["../../etc/passwd", "..", "nested/file.pdf"])
def test_download_rejects_path_traversal(doctor_client, filename):
    res = doctor_client.get(f"{URL}download/", {"filename": filename})
    assert res.status_code == 400
    assert res.json()["fields"]["filename"] == "Invalid filename - path traversal not allowed"


def test_download_requires_filename_and_existing_file(media_root, doctor_client):
    res = doctor_client.get(f"{URL}download/")
    assert res.status_code == 400
    assert res.json()["fields"]["filename"] == "Filename is required"

    res = doctor_client.get(f"{URL}download/", {"filename": "missing.pdf"})
    assert res.status_code == 404
    assert res.json()["error"] == "File not found"


def test_keep_attachments_must_be_known(doctor_client, record):
    record.attachments = ["abc-scan.pdf"]
    record.save()

    res = doctor_client.patch(f"{URL}{record.id}/", {"keep_attachments": ["other.pdf"]}, format="json")
    assert res.status_code == 400

    res = doctor_client.patch(f"{URL}{record.id}/", {"keep_attachments": []}, format="json")
    assert res.status_code == 200
    assert res.json()["data"]["attachments"] == []


def test_record_stats(doctor_client, record):
    data = doctor_client.get(f"{URL}stats/").json()["data"]
    assert data["total"] == 1
    assert data["by_type"] == {"LAB_RESULT": 1}
    assert data["patients"] == 1
