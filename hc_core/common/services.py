# hc_core/common/services.py
from __future__ import annotations

import logging
from typing import Any, ClassVar

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from hc_core.audit.services import AuditService
from hc_core.common.transitions import StatusMachine

logger = logging.getLogger(__name__)


class ResourceService:
    """
    Write-model operations shared by every CRUD resource.

    Subclasses configure:
      model:              Django model (a ResourceModel)
      event_prefix:       audit code prefix, e.g. "record" -> "record.created"
      updatable_fields:   fields a PUT/PATCH may change; anything else is ignored
      status_machine:     transition table checked whenever `status` changes
      deleted_status:     status set by soft delete (None = only flip is_active)
      unique_error:       message used when a unique constraint is hit

    Hooks (override as needed):
      prepare_create(actor, data) -> dict of model kwargs
      clean_update(instance, updates) -> may adjust updates / raise ValidationError
    """

    model: ClassVar[Any] = None
    event_prefix: ClassVar[str] = ""
    updatable_fields: ClassVar[frozenset[str]] = frozenset()
    status_machine: ClassVar[StatusMachine | None] = None
    deleted_status: ClassVar[str | None] = None
    unique_error: ClassVar[str] = "A record with these details already exists."

    # -------------------------
    # Internal helpers
    # -------------------------
    @classmethod
    def _entity_type(cls) -> str:
        return cls.model.__name__

    @classmethod
    def _audit(cls, action: str, instance, actor, metadata: dict | None = None) -> None:
        AuditService.log(
            event_code=f"{cls.event_prefix}.{action}",
            entity_type=cls._entity_type(),
            entity_id=instance.pk,
            actor_user_id=getattr(actor, "pk", None),
            metadata=metadata or {},
        )

    @classmethod
    def _save(cls, instance, **kwargs) -> None:
        # Savepoint so an IntegrityError doesn't poison the outer transaction.
        try:
            with transaction.atomic(savepoint=True):
                instance.save(**kwargs)
        except IntegrityError:
            raise ValidationError(cls.unique_error)

    # -------------------------
    # Hooks
    # -------------------------
    @classmethod
    def prepare_create(cls, *, actor, data: dict) -> dict:
        return data

    @classmethod
    def clean_update(cls, *, instance, updates: dict) -> dict:
        return updates

    # -------------------------
    # Create
    # -------------------------
    @classmethod
    @transaction.atomic
    def create(cls, *, actor, data: dict):
        instance = cls.model(**cls.prepare_create(actor=actor, data=dict(data)))
        cls._save(instance, force_insert=True)

        cls._audit("created", instance, actor)
        return instance

    # -------------------------
    # Update (partial merge)
    # -------------------------
    @classmethod
    @transaction.atomic
    def update(cls, *, instance, actor, data: dict):
        """
        Merge only the provided, updatable fields. Fields absent from `data`
        are left untouched. Re-sending the current values is a no-op (no save,
        no audit row).
        """
        updates = {k: v for k, v in (data or {}).items() if k in cls.updatable_fields}
        updates = cls.clean_update(instance=instance, updates=updates)

        changed = {k: v for k, v in updates.items() if getattr(instance, k) != v}
        if not changed:
            return instance

        if "status" in changed and cls.status_machine is not None:
            cls.status_machine.check(instance.status, changed["status"])

        previous_status = getattr(instance, "status", None)
        for k, v in changed.items():
            setattr(instance, k, v)
        cls._save(instance)

        metadata: dict[str, Any] = {"updated_fields": sorted(changed.keys())}
        if "status" in changed:
            metadata["status"] = {"from": previous_status, "to": changed["status"]}
        cls._audit("updated", instance, actor, metadata)
        return instance

    @classmethod
    def change_status(cls, *, instance, actor, status: str):
        return cls.update(instance=instance, actor=actor, data={"status": status})

    # -------------------------
    # Soft delete
    # -------------------------
    @classmethod
    @transaction.atomic
    def soft_delete(cls, *, instance, actor):
        """
        Deactivate instead of removing the row. Deletion is not a status
        transition, so the status table is not consulted.
        """
        if not instance.is_active:
            return instance

        instance.is_active = False
        update_fields = ["is_active", "updated_at"]
        if cls.deleted_status is not None:
            instance.status = cls.deleted_status
            update_fields.append("status")
        instance.save(update_fields=update_fields)

        cls._audit("deleted", instance, actor)
        return instance
