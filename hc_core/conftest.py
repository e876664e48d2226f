# hc_core/conftest.py
from datetime import date, time
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from hc_core.client.transport import ApiClient, ApiResponse
from hc_core.common.permissions import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT, ROLE_PHARMACIST
from hc_core.iam.models import UserProfile
from hc_core.patients.models import Patient
from hc_core.pharmacies.models import Pharmacy
from hc_core.records.models import MedicalRecord
from hc_core.shop.models import Product


def make_user(username: str, role: str, **extra):
    """
    User in the given role group, with a portal profile.
    Password is always "Pass@12345".
    """
    User = get_user_model()
    user = User.objects.create_user(username=username, password="Pass@12345", is_active=True, **extra)
    group, _ = Group.objects.get_or_create(name=role)
    user.groups.add(group)
    UserProfile.objects.create(user=user)
    return user


def client_for(user) -> APIClient:
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def admin_user(db):
    return make_user("admin", ROLE_ADMIN)


@pytest.fixture
def doctor(db):
    return make_user("dr_silva", ROLE_DOCTOR, first_name="Nimal", last_name="Silva")


@pytest.fixture
def other_doctor(db):
    return make_user("dr_perera", ROLE_DOCTOR, first_name="Kamal", last_name="Perera")


@pytest.fixture
def pharmacist(db):
    return make_user("pharm_fernando", ROLE_PHARMACIST)


@pytest.fixture
def other_pharmacist(db):
    return make_user("pharm_jayasuriya", ROLE_PHARMACIST)


@pytest.fixture
def patient_user(db):
    return make_user("patient_dias", ROLE_PATIENT)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def doctor_client(doctor):
    return client_for(doctor)


@pytest.fixture
def pharmacist_client(pharmacist):
    return client_for(pharmacist)


@pytest.fixture
def patient_client(patient_user):
    return client_for(patient_user)


@pytest.fixture
def patient(db, doctor):
    return Patient.objects.create(
        first_name="Amara",
        last_name="Wickramasinghe",
        email="amara@example.com",
        phone="+94 77 123 4567",
        nic="199012345678",
        date_of_birth=date(1990, 5, 17),
        gender="FEMALE",
        blood_type="O+",
        created_by=doctor,
    )


@pytest.fixture
def pharmacy(db, pharmacist):
    return Pharmacy.objects.create(
        name="City Care Pharmacy",
        address="12 Galle Road",
        city="Colombo",
        phone="+94 11 234 5678",
        license_number="PH-0001",
        opening_time=time(9, 0),
        closing_time=time(18, 0),
        created_by=pharmacist,
    )


@pytest.fixture
def product(db, pharmacy, pharmacist):
    return Product.objects.create(
        pharmacy=pharmacy,
        name="Paracetamol 500mg",
        category="OTC",
        price=Decimal("50.00"),
        cost_price=Decimal("30.00"),
        stock_quantity=20,
        sku="PARA-500",
        created_by=pharmacist,
    )


@pytest.fixture
def record(db, patient, doctor):
    return MedicalRecord.objects.create(
        patient=patient,
        doctor=doctor,
        record_type="LAB_RESULT",
        title="Full blood count",
        description="Routine check",
        date=date(2024, 3, 1),
        status="ACTIVE",
    )


class APIClientTransport:
    """
    Client-side Transport backed by the DRF test client, so the client views
    and forms run against the real URLconf without a server.
    """

    prefix = "/api"

    def __init__(self, api_client: APIClient):
        self.api_client = api_client
        self.calls: list[tuple[str, str]] = []

    def request(self, method, path, *, params=None, json=None) -> ApiResponse:
        self.calls.append((method, path))
        url = f"{self.prefix}{path}"
        handler = getattr(self.api_client, method.lower())
        if method.upper() == "GET":
            res = handler(url, params or {})
        elif method.upper() == "DELETE":
            res = handler(url)
        else:
            res = handler(url, json, format="json")

        if getattr(res, "streaming", False):
            content = b"".join(res.streaming_content)
        else:
            content = res.content

        body = None
        if res.get("Content-Type", "").startswith("application/json") and content:
            body = res.json()
        return ApiResponse(status=res.status_code, body=body, content=content, headers=dict(res.items()))


@pytest.fixture
def doctor_transport(doctor_client):
    return APIClientTransport(doctor_client)


@pytest.fixture
def doctor_api(doctor_transport):
    return ApiClient(doctor_transport)


@pytest.fixture
def pharmacist_api(pharmacist_client):
    return ApiClient(APIClientTransport(pharmacist_client))
