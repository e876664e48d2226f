# hc_core/common/api/views.py
from __future__ import annotations

from uuid import UUID

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError

from hc_core.common.api.exceptions import InvalidIdError
from hc_core.common.api.responses import success_response
from hc_core.common.permissions import ROLE_ADMIN, user_roles


class ResourceViewSet(viewsets.GenericViewSet):
    """
    One route handler for every CRUD resource, configured per resource:

      queryset                  base rows (all, including soft-deleted)
      serializer_class          read shape (references expanded)
      create_serializer_class   POST payload
      update_serializer_class   PUT/PATCH payload (always merged partially)
      filterset_class           server-side filters (search/date range/exact)
      service                   ResourceService subclass doing the writes
      owner_field / scoped_roles
          actors holding one of scoped_roles only see rows where
          owner_field == actor; ADMIN sees everything

    Contract:
      GET    /<res>/        active rows in scope, filtered + paginated
      GET    /<res>/<id>/   any row in scope (soft-deleted rows included)
      POST   /<res>/        201 {success, data, message}
      PUT    /<res>/<id>/   partial merge, active rows only
      PATCH  /<res>/<id>/   same as PUT
      DELETE /<res>/<id>/   soft delete, {success, message}
    """

    resource_label = "Resource"
    owner_field: str | None = None
    scoped_roles: frozenset[str] = frozenset()

    service = None
    create_serializer_class = None
    update_serializer_class = None

    select_related: tuple[str, ...] = ()
    prefetch_related: tuple[str, ...] = ()
    ordering: tuple[str, ...] = ("-created_at",)

    # ----------------------------
    # Scope + lookup
    # ----------------------------
    def scope_queryset(self, qs):
        """
        Narrow rows to what the actor may see. Override for resources with
        more than one owner path.
        """
        roles = user_roles(self.request.user)
        if ROLE_ADMIN in roles or not self.owner_field:
            return qs
        if roles & set(self.scoped_roles):
            return qs.filter(**{self.owner_field: self.request.user})
        return qs

    def get_queryset(self):
        qs = super().get_queryset()
        if self.select_related:
            qs = qs.select_related(*self.select_related)
        if self.prefetch_related:
            qs = qs.prefetch_related(*self.prefetch_related)
        return self.scope_queryset(qs).order_by(*self.ordering)

    def get_serializer_class(self):
        if self.action == "create" and self.create_serializer_class is not None:
            return self.create_serializer_class
        if self.action in ("update", "partial_update") and self.update_serializer_class is not None:
            return self.update_serializer_class
        return self.serializer_class

    def parse_id(self, raw) -> UUID:
        try:
            return UUID(str(raw))
        except ValueError:
            raise InvalidIdError(f"Invalid {self.resource_label.lower()} ID")

    def not_found(self) -> NotFound:
        return NotFound(f"{self.resource_label} not found")

    def get_object(self):
        lookup_url_kwarg = self.lookup_url_kwarg or self.lookup_field
        pk = self.parse_id(self.kwargs[lookup_url_kwarg])

        try:
            obj = self.get_queryset().get(pk=pk)
        except self.get_queryset().model.DoesNotExist:
            raise self.not_found()

        self.check_object_permissions(self.request, obj)
        return obj

    def get_active_object(self):
        obj = self.get_object()
        if not obj.is_active:
            raise self.not_found()
        return obj

    def read(self, instance) -> dict:
        return self.serializer_class(instance, context=self.get_serializer_context()).data

    # ----------------------------
    # Reads
    # ----------------------------
    def list(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset().filter(is_active=True))

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.serializer_class(page, many=True, context=self.get_serializer_context()).data)

        return success_response(self.serializer_class(qs, many=True, context=self.get_serializer_context()).data)

    def retrieve(self, request, *args, **kwargs):
        return success_response(self.read(self.get_object()))

    # ----------------------------
    # Writes
    # ----------------------------
    def create(self, request, *args, **kwargs):
        ser = self.create_serializer_class(data=request.data, context=self.get_serializer_context())
        ser.is_valid(raise_exception=True)

        instance = self.service.create(actor=request.user, data=ser.validated_data)
        return success_response(
            self.read(instance),
            message=f"{self.resource_label} created successfully",
            status=status.HTTP_201_CREATED,
        )

    def _merge(self, request):
        instance = self.get_active_object()

        ser = self.update_serializer_class(
            instance=instance,
            data=request.data,
            partial=True,
            context=self.get_serializer_context(),
        )
        ser.is_valid(raise_exception=True)

        instance = self.service.update(instance=instance, actor=request.user, data=ser.validated_data)
        return success_response(self.read(instance), message=f"{self.resource_label} updated successfully")

    def update(self, request, *args, **kwargs):
        return self._merge(request)

    def partial_update(self, request, *args, **kwargs):
        return self._merge(request)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_active_object()
        self.service.soft_delete(instance=instance, actor=request.user)
        return success_response(message=f"{self.resource_label} deleted successfully")


class StatusActionMixin:
    """
    PATCH /<res>/<id>/status/  {"status": "<VALUE>"}

    Goes through the service's transition table; an illegal move is a 409.
    """

    @action(detail=True, methods=["patch", "put"], url_path="status")
    def set_status(self, request, pk=None):
        instance = self.get_active_object()

        target = request.data.get("status")
        if not target:
            raise DRFValidationError({"status": ["This field is required."]})

        machine = self.service.status_machine
        if machine is not None and target not in machine.states:
            raise DRFValidationError({"status": [f'"{target}" is not a valid choice.']})

        instance = self.service.change_status(instance=instance, actor=request.user, status=target)
        return success_response(self.read(instance), message="Status updated successfully")
