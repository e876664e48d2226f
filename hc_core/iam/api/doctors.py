# hc_core/iam/api/doctors.py
from __future__ import annotations

from django.shortcuts import get_object_or_404
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError

from hc_core.common.api.pagination import paginate
from hc_core.common.api.responses import success_response
from hc_core.common.permissions import DoctorDirectoryPermission
from hc_core.common.validators import TIME_FORMAT_MSG, WEEKDAYS, parse_date, parse_time
from hc_core.iam.api.serializers import DoctorSerializer
from hc_core.iam.filters import DoctorFilter
from hc_core.iam.selectors import available_doctors, doctors

DEFAULT_AVAILABLE_LIMIT = 10


def _param(name: str, description: str, type_=OpenApiTypes.STR) -> OpenApiParameter:
    return OpenApiParameter(name=name, type=type_, location=OpenApiParameter.QUERY, required=False, description=description)


class DoctorViewSet(viewsets.GenericViewSet):
    """
    Read-only doctor directory used when booking appointments.
    """
    permission_classes = [DoctorDirectoryPermission]
    serializer_class = DoctorSerializer
    filterset_class = DoctorFilter

    def get_queryset(self):
        return doctors()

    @extend_schema(tags=["Doctors"], responses={200: DoctorSerializer(many=True)})
    def list(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return paginate(request, qs, DoctorSerializer, view=self)

    @extend_schema(tags=["Doctors"], responses={200: DoctorSerializer})
    def retrieve(self, request, pk=None):
        if not str(pk).isdigit():
            raise NotFound("Doctor not found")
        doctor = get_object_or_404(self.get_queryset(), pk=int(pk))
        return success_response(DoctorSerializer(doctor).data)

    @extend_schema(
        tags=["Doctors"],
        responses={200: DoctorSerializer(many=True)},
        parameters=[
            _param("day", "Weekday name; defaults to the weekday of `date`, else today."),
            _param("date", "YYYY-MM-DD. With `time`, doctors already booked then are left out.", OpenApiTypes.DATE),
            _param("time", "HH:MM inside the doctor's working hours."),
            _param("specialization", "Case-insensitive substring."),
            _param("limit", "Max doctors returned (default 10).", OpenApiTypes.INT),
        ],
    )
    @action(detail=False, methods=["get"], url_path="available")
    def available(self, request):
        params = request.query_params

        on = None
        if params.get("date"):
            on = parse_date(params["date"])
            if on is None:
                raise DRFValidationError({"date": ["Date must be in YYYY-MM-DD format"]})

        day = (params.get("day") or "").strip().lower()
        if not day:
            day = WEEKDAYS[(on or timezone.localdate()).weekday()]
        elif day not in WEEKDAYS:
            raise DRFValidationError({"day": [f"Unknown weekday: {day}"]})

        at = None
        if params.get("time"):
            at = parse_time(params["time"])
            if at is None:
                raise DRFValidationError({"time": [TIME_FORMAT_MSG]})

        try:
            limit = max(1, int(params.get("limit") or DEFAULT_AVAILABLE_LIMIT))
        except ValueError:
            limit = DEFAULT_AVAILABLE_LIMIT

        found = available_doctors(day=day, at=at, on=on, specialization=params.get("specialization"))
        return success_response(DoctorSerializer(found[:limit], many=True).data)
