# hc_core/records/services.py
from __future__ import annotations

from hc_core.common.services import ResourceService
from hc_core.common.transitions import StatusMachine
from hc_core.records.models import MedicalRecord, RecordStatus
from hc_core.records.storage import save_attachment

R = RecordStatus

RECORD_STATUS = StatusMachine(
    {
        R.ACTIVE: {R.COMPLETED, R.ARCHIVED},
        R.COMPLETED: {R.ACTIVE, R.ARCHIVED},
        R.ARCHIVED: {R.ACTIVE},
    }
)


class MedicalRecordService(ResourceService):
    model = MedicalRecord
    event_prefix = "record"
    status_machine = RECORD_STATUS
    updatable_fields = frozenset(
        {"patient", "record_type", "title", "description", "date", "status", "doctor_notes", "attachments", "files"}
    )

    @classmethod
    def prepare_create(cls, *, actor, data: dict) -> dict:
        data["doctor"] = actor
        data["attachments"] = [save_attachment(f) for f in data.pop("files", None) or []]
        return data

    @classmethod
    def clean_update(cls, *, instance, updates: dict) -> dict:
        files = updates.pop("files", None) or []
        if files:
            # new uploads are appended to whatever the record already has
            current = list(updates.get("attachments", instance.attachments) or [])
            updates["attachments"] = current + [save_attachment(f) for f in files]
        return updates
