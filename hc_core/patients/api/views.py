# hc_core/patients/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError

from hc_core.common.api.responses import success_response
from hc_core.common.api.views import ResourceViewSet
from hc_core.common.permissions import PatientPermission
from hc_core.patients.api.serializers import (
    PatientCreateSerializer,
    PatientSerializer,
    PatientUpdateSerializer,
)
from hc_core.patients.filters import PatientFilter
from hc_core.patients.models import Patient
from hc_core.patients.selectors import get_patient_by_nic, patient_stats
from hc_core.patients.services import PatientService


class PatientViewSet(ResourceViewSet):
    """
    Shared patient directory. No owner scoping: every clinician sees the
    same patients.
    """
    permission_classes = [PatientPermission]

    queryset = Patient.objects.all()
    serializer_class = PatientSerializer
    create_serializer_class = PatientCreateSerializer
    update_serializer_class = PatientUpdateSerializer
    filterset_class = PatientFilter

    service = PatientService
    resource_label = "Patient"

    @extend_schema(
        tags=["Patients"],
        parameters=[
            OpenApiParameter(
                name="nic",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=True,
                description="National identity card number (exact, case-insensitive).",
            )
        ],
        responses={200: PatientSerializer},
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        nic = (request.query_params.get("nic") or "").strip()
        if not nic:
            raise DRFValidationError({"nic": ["This field is required."]})

        try:
            patient = get_patient_by_nic(nic=nic)
        except Patient.DoesNotExist:
            raise self.not_found()
        return success_response(self.read(patient))

    @extend_schema(tags=["Patients"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return success_response(patient_stats())
