# hc_core/common/models.py
from __future__ import annotations

import uuid
from django.db import models


class TimeStampedModel(models.Model):
    """
    Standard timestamps for all entities.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ResourceModel(TimeStampedModel):
    """
    Base for every CRUD resource exposed through the API.

    Rows are never physically removed by the API: DELETE flips `is_active`
    (and, for resources with a lifecycle, moves `status` to its terminal value).
    Collection reads filter on `is_active`; lookups by id do not.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        abstract = True
