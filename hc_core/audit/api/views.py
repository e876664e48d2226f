# hc_core/audit/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError as DRFValidationError

from hc_core.audit.api.serializers import AuditEventSerializer
from hc_core.audit.models import AuditEvent
from hc_core.audit.selectors import list_audit_events
from hc_core.common.api.pagination import paginate
from hc_core.common.permissions import AuditPermission


def _query_param(name: str, description: str, type_=OpenApiTypes.STR) -> OpenApiParameter:
    return OpenApiParameter(
        name=name,
        type=type_,
        location=OpenApiParameter.QUERY,
        required=False,
        description=description,
    )


class AuditEventViewSet(viewsets.GenericViewSet):
    """
    Read-only trail of service writes, newest first. Admin only.
    """
    permission_classes = [AuditPermission]

    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditEventSerializer(many=True)},
        parameters=[
            _query_param("entity_type", "Model name, e.g. MedicalRecord."),
            _query_param("entity_id", "Entity UUID.", OpenApiTypes.UUID),
            _query_param("event_code", "e.g. record.updated"),
            _query_param("actor", "Acting user id.", OpenApiTypes.INT),
        ],
    )
    def list(self, request):
        params = request.query_params

        entity_id = None
        if params.get("entity_id"):
            try:
                entity_id = UUID(str(params["entity_id"]))
            except ValueError:
                raise DRFValidationError({"entity_id": ["Invalid entity_id (UUID expected)"]})

        actor_user_id = None
        if params.get("actor"):
            try:
                actor_user_id = int(params["actor"])
            except ValueError:
                raise DRFValidationError({"actor": ["Invalid actor (integer expected)"]})

        qs = list_audit_events(
            entity_type=params.get("entity_type") or None,
            entity_id=entity_id,
            event_code=params.get("event_code") or None,
            actor_user_id=actor_user_id,
        )
        return paginate(request, qs, AuditEventSerializer, view=self)
