# hc_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from hc_core.appointments.api.views import AppointmentViewSet
from hc_core.audit.api.views import AuditEventViewSet
from hc_core.iam.api.auth import LoginView, LogoutView, RefreshView, RegisterView
from hc_core.iam.api.doctors import DoctorViewSet
from hc_core.iam.api.me import MeView
from hc_core.patients.api.views import PatientViewSet
from hc_core.pharmacies.api.views import PharmacyViewSet
from hc_core.prescriptions.api.views import PrescriptionViewSet
from hc_core.records.api.views import MedicalRecordViewSet
from hc_core.shop.api.views import CheckoutView, OrderViewSet, ProductViewSet

router = DefaultRouter()

# ViewSet-backed resources (centralized)
router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"records", MedicalRecordViewSet, basename="records")
router.register(r"prescriptions", PrescriptionViewSet, basename="prescriptions")
router.register(r"appointments", AppointmentViewSet, basename="appointments")
router.register(r"pharmacies", PharmacyViewSet, basename="pharmacies")
router.register(r"doctors", DoctorViewSet, basename="doctors")

# ✅ Shop
router.register(r"products", ProductViewSet, basename="products")
router.register(r"orders", OrderViewSet, basename="orders")

router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

urlpatterns = [
    # 🔐 Auth + /me
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("me/", MeView.as_view(), name="me"),

    path("checkout/", CheckoutView.as_view(), name="checkout"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
