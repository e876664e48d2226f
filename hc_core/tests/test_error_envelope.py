# hc_core/tests/test_error_envelope.py
import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIRequestFactory

from hc_core.common.api.exceptions import api_exception_handler, flatten_errors
from hc_core.common.transitions import InvalidTransition


def _handle(exc):
    request = APIRequestFactory().get("/api/patients/")
    return api_exception_handler(exc, {"request": request, "view": None})


def test_flatten_nested_errors():
    data = {
        "title": ["Title is required"],
        "medications": [{}, {"dosage": ["Dosage is required"]}],
        "non_field_errors": ["At least one field is required."],
    }
    assert flatten_errors(data) == [
        "title: Title is required",
        "medications[1].dosage: Dosage is required",
        "At least one field is required.",
    ]


def test_drf_validation_error_envelope():
    res = _handle(ValidationError({"phone": ["Please enter a valid phone number"]}))
    assert res.status_code == 400
    assert res.data["success"] is False
    assert res.data["error"] == "Validation failed"
    assert res.data["code"] == "validation_error"
    assert res.data["details"] == ["phone: Please enter a valid phone number"]
    assert res.data["fields"] == {"phone": "Please enter a valid phone number"}
    assert res.data["request_id"]


def test_django_validation_error_is_a_400():
    res = _handle(DjangoValidationError({"end_date": ["End date must be after start date"]}))
    assert res.status_code == 400
    assert res.data["fields"] == {"end_date": "End date must be after start date"}


def test_invalid_transition_is_a_409():
    res = _handle(InvalidTransition("COMPLETED", "ACTIVE"))
    assert res.status_code == 409
    assert res.data["code"] == "invalid_transition"
    assert res.data["error"] == "Cannot change status from COMPLETED to ACTIVE"


def test_unhandled_error_is_a_500():
    res = _handle(RuntimeError("boom"))
    assert res.status_code == 500
    assert res.data["error"] == "Internal server error"
    assert "boom" not in str(res.data)


@pytest.mark.django_db
def test_request_id_is_echoed(doctor_client):
    res = doctor_client.get("/api/records/not-a-uuid/", HTTP_X_REQUEST_ID="req-12345678")
    assert res.status_code == 400
    assert res["X-Request-Id"] == "req-12345678"
    assert res.json()["request_id"] == "req-12345678"
    assert res.json()["error"] == "Invalid medical record ID"
