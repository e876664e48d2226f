# hc_core/appointments/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action

from hc_core.appointments.api.serializers import (
    AppointmentCreateSerializer,
    AppointmentSerializer,
    AppointmentUpdateSerializer,
)
from hc_core.appointments.filters import AppointmentFilter
from hc_core.appointments.models import Appointment
from hc_core.appointments.selectors import appointment_stats
from hc_core.appointments.services import AppointmentService
from hc_core.common.api.responses import success_response
from hc_core.common.api.views import ResourceViewSet, StatusActionMixin
from hc_core.common.permissions import ROLE_DOCTOR, ROLE_PHARMACIST, AppointmentPermission


class AppointmentViewSet(StatusActionMixin, ResourceViewSet):
    permission_classes = [AppointmentPermission]

    queryset = Appointment.objects.all()
    serializer_class = AppointmentSerializer
    create_serializer_class = AppointmentCreateSerializer
    update_serializer_class = AppointmentUpdateSerializer
    filterset_class = AppointmentFilter

    service = AppointmentService
    resource_label = "Appointment"
    owner_field = "provider"
    scoped_roles = frozenset({ROLE_DOCTOR, ROLE_PHARMACIST})
    select_related = ("patient", "provider", "provider__hc_profile", "pharmacy")
    ordering = ("appointment_date", "appointment_time")

    @extend_schema(tags=["Appointments"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return success_response(appointment_stats(user=request.user))
