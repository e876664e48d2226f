# hc_core/records/api/views.py
from __future__ import annotations

from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser

from hc_core.common.api.responses import success_response
from hc_core.common.api.views import ResourceViewSet, StatusActionMixin
from hc_core.common.permissions import ROLE_DOCTOR, MedicalRecordPermission
from hc_core.records.api.serializers import (
    MedicalRecordCreateSerializer,
    MedicalRecordSerializer,
    MedicalRecordUpdateSerializer,
)
from hc_core.records.filters import MedicalRecordFilter
from hc_core.records.models import MedicalRecord
from hc_core.records.selectors import record_stats, record_with_attachment
from hc_core.records.services import MedicalRecordService
from hc_core.records.storage import UnsafeFilename, attachment_exists, clean_filename, open_attachment


class MedicalRecordViewSet(StatusActionMixin, ResourceViewSet):
    permission_classes = [MedicalRecordPermission]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    queryset = MedicalRecord.objects.all()
    serializer_class = MedicalRecordSerializer
    create_serializer_class = MedicalRecordCreateSerializer
    update_serializer_class = MedicalRecordUpdateSerializer
    filterset_class = MedicalRecordFilter

    service = MedicalRecordService
    resource_label = "Medical record"
    owner_field = "doctor"
    scoped_roles = frozenset({ROLE_DOCTOR})
    select_related = ("patient", "doctor", "doctor__hc_profile")
    ordering = ("-date", "-created_at")

    @extend_schema(tags=["Records"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return success_response(record_stats(user=request.user))

    @extend_schema(
        tags=["Records"],
        parameters=[
            OpenApiParameter(
                name="filename",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Stored attachment name (as listed in a record's attachments).",
            )
        ],
        responses={(200, "application/octet-stream"): OpenApiTypes.BINARY},
    )
    @action(detail=False, methods=["get"], url_path="download")
    def download(self, request):
        raw = request.query_params.get("filename")
        if not raw:
            raise DRFValidationError({"filename": ["Filename is required"]})

        try:
            name = clean_filename(raw)
        except UnsafeFilename as e:
            raise DRFValidationError({"filename": [str(e)]})

        # only attachments of records the actor can see
        if record_with_attachment(user=request.user, filename=name) is None or not attachment_exists(name):
            raise NotFound("File not found")

        return FileResponse(open_attachment(name), as_attachment=True, filename=name)
