# hc_core/pharmacies/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action

from hc_core.common.api.responses import success_response
from hc_core.common.api.views import ResourceViewSet, StatusActionMixin
from hc_core.common.permissions import ROLE_ADMIN, ROLE_PATIENT, ROLE_PHARMACIST, PharmacyPermission, user_roles
from hc_core.pharmacies.api.serializers import (
    PharmacyCreateSerializer,
    PharmacySerializer,
    PharmacyUpdateSerializer,
)
from hc_core.pharmacies.filters import PharmacyFilter
from hc_core.pharmacies.models import Pharmacy
from hc_core.pharmacies.selectors import pharmacy_stats
from hc_core.pharmacies.services import PharmacyService


class PharmacyViewSet(StatusActionMixin, ResourceViewSet):
    permission_classes = [PharmacyPermission]

    queryset = Pharmacy.objects.all()
    serializer_class = PharmacySerializer
    create_serializer_class = PharmacyCreateSerializer
    update_serializer_class = PharmacyUpdateSerializer
    filterset_class = PharmacyFilter

    service = PharmacyService
    resource_label = "Pharmacy"
    owner_field = "created_by"
    scoped_roles = frozenset({ROLE_PHARMACIST})
    ordering = ("name",)

    def scope_queryset(self, qs):
        roles = user_roles(self.request.user)
        if ROLE_ADMIN in roles:
            return qs
        if ROLE_PHARMACIST in roles:
            return qs.filter(created_by=self.request.user)
        if ROLE_PATIENT in roles:
            # shop browsing: only pharmacies that are open for business
            return qs.filter(is_active=True, status="ACTIVE")
        return qs

    @extend_schema(tags=["Pharmacies"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"], url_path="stats")
    def stats(self, request, pk=None):
        return success_response(pharmacy_stats(pharmacy=self.get_object()))
