# hc_core/records/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hc_core.common.validators import not_future_error
from hc_core.iam.api.serializers import UserRefSerializer
from hc_core.patients.api.serializers import PatientRefSerializer
from hc_core.patients.models import Patient
from hc_core.records.models import MedicalRecord, RecordStatus, RecordType


def _patient_field(**kwargs):
    return serializers.PrimaryKeyRelatedField(
        queryset=Patient.objects.filter(is_active=True),
        pk_field=serializers.UUIDField(),
        error_messages={
            "required": "Patient is required",
            "null": "Patient is required",
            "does_not_exist": "Patient not found",
        },
        **kwargs,
    )


class _RecordWriteMixin:
    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def validate_date(self, value):
        err = not_future_error(value, label="Date")
        if err:
            raise serializers.ValidationError(err)
        return value


class MedicalRecordCreateSerializer(_RecordWriteMixin, serializers.Serializer):
    patient = _patient_field()
    record_type = serializers.ChoiceField(
        choices=RecordType.choices,
        error_messages={"required": "Record type is required"},
    )
    title = serializers.CharField(
        max_length=200,
        error_messages={"required": "Title is required", "blank": "Title is required"},
    )
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
    date = serializers.DateField(error_messages={"required": "Date is required"})
    status = serializers.ChoiceField(choices=RecordStatus.choices, required=False, default=RecordStatus.ACTIVE)
    doctor_notes = serializers.CharField(max_length=2000, required=False, allow_blank=True, default="")

    # multipart uploads, form key "attachments"
    attachments = serializers.ListField(
        child=serializers.FileField(),
        required=False,
        default=list,
        write_only=True,
        source="files",
    )


class MedicalRecordUpdateSerializer(_RecordWriteMixin, serializers.Serializer):
    patient = _patient_field(required=False)
    record_type = serializers.ChoiceField(choices=RecordType.choices, required=False)
    title = serializers.CharField(max_length=200, required=False, error_messages={"blank": "Title is required"})
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=RecordStatus.choices, required=False)
    doctor_notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)

    attachments = serializers.ListField(child=serializers.FileField(), required=False, write_only=True, source="files")
    # stored names to keep; anything not listed is detached from the record
    keep_attachments = serializers.ListField(
        child=serializers.CharField(max_length=255),
        required=False,
        source="attachments",
    )

    def validate_keep_attachments(self, value):
        current = set(self.instance.attachments or []) if self.instance is not None else set()
        unknown = [v for v in value if v not in current]
        if unknown:
            raise serializers.ValidationError(f"Unknown attachment: {', '.join(unknown)}")
        return value


class MedicalRecordSerializer(serializers.ModelSerializer):
    patient = PatientRefSerializer(read_only=True)
    doctor = UserRefSerializer(read_only=True)

    class Meta:
        model = MedicalRecord
        fields = [
            "id",
            "patient",
            "doctor",
            "record_type",
            "title",
            "description",
            "date",
            "status",
            "attachments",
            "doctor_notes",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
