# hc_core/prescriptions/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action

from hc_core.common.api.responses import success_response
from hc_core.common.api.views import ResourceViewSet, StatusActionMixin
from hc_core.common.permissions import ROLE_DOCTOR, PrescriptionPermission
from hc_core.prescriptions.api.serializers import (
    PrescriptionCreateSerializer,
    PrescriptionSerializer,
    PrescriptionUpdateSerializer,
)
from hc_core.prescriptions.filters import PrescriptionFilter
from hc_core.prescriptions.models import Prescription
from hc_core.prescriptions.selectors import prescription_stats
from hc_core.prescriptions.services import PrescriptionService


class PrescriptionViewSet(StatusActionMixin, ResourceViewSet):
    """
    Doctors see the prescriptions they issued; pharmacists see all of them
    and may mark one COMPLETED once dispensed.
    """
    permission_classes = [PrescriptionPermission]

    queryset = Prescription.objects.all()
    serializer_class = PrescriptionSerializer
    create_serializer_class = PrescriptionCreateSerializer
    update_serializer_class = PrescriptionUpdateSerializer
    filterset_class = PrescriptionFilter

    service = PrescriptionService
    resource_label = "Prescription"
    owner_field = "doctor"
    scoped_roles = frozenset({ROLE_DOCTOR})
    select_related = ("patient", "doctor", "doctor__hc_profile")

    @extend_schema(tags=["Prescriptions"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return success_response(prescription_stats(user=request.user))
