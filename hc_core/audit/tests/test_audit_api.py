import pytest
from django.contrib.auth.models import Group
from django.core.management import call_command

from hc_core.common.permissions import ALL_ROLES


@pytest.mark.django_db
def test_admin_lists_events_for_one_entity(admin_client, doctor_client, patient):
    res = doctor_client.patch(f"/api/patients/{patient.id}/", {"address": "5 Temple Road, Kandy"}, format="json")
    assert res.status_code == 200

    res = admin_client.get("/api/audit/events/", {"entity_id": str(patient.id)})
    assert res.status_code == 200
    codes = [e["event_code"] for e in res.json()["data"]]
    assert codes == ["patient.updated"]
    assert res.json()["data"][0]["entity_type"] == "Patient"


@pytest.mark.django_db
def test_bad_entity_id_is_400(admin_client):
    res = admin_client.get("/api/audit/events/", {"entity_id": "nope"})
    assert res.status_code == 400
    assert res.json()["success"] is False


@pytest.mark.django_db
def test_audit_is_admin_only(doctor_client):
    res = doctor_client.get("/api/audit/events/")
    assert res.status_code == 403
    assert res.json()["error"] == "Forbidden - Admin access required"


@pytest.mark.django_db
def test_ensure_roles_is_idempotent():
    call_command("ensure_roles")
    call_command("ensure_roles")
    assert set(Group.objects.values_list("name", flat=True)) == set(ALL_ROLES)


@pytest.mark.django_db
def test_events_are_paginated_and_filter_by_actor(admin_client, doctor_client, doctor, patient):
    url = f"/api/patients/{patient.id}/"
    doctor_client.patch(url, {"address": "1 Lake Drive"}, format="json")
    doctor_client.patch(url, {"address": "2 Lake Drive"}, format="json")

    res = admin_client.get("/api/audit/events/", {"actor": doctor.id, "limit": 1})
    body = res.json()
    assert res.status_code == 200
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}
    assert body["data"][0]["actor_user_id"] == doctor.id
