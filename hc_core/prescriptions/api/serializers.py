# hc_core/prescriptions/api/serializers.py
from __future__ import annotations

from datetime import date

from rest_framework import serializers

from hc_core.iam.api.serializers import UserRefSerializer
from hc_core.patients.api.serializers import PatientRefSerializer
from hc_core.patients.models import Patient
from hc_core.prescriptions.models import Prescription, PrescriptionStatus

MEDICATION_REQUIRED_MSG = "At least one medication is required"


class MedicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, error_messages={"required": "Medication name is required"})
    dosage = serializers.CharField(max_length=100, error_messages={"required": "Dosage is required"})
    frequency = serializers.CharField(max_length=100, error_messages={"required": "Frequency is required"})
    duration = serializers.CharField(max_length=100, error_messages={"required": "Duration is required"})
    instructions = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    quantity = serializers.IntegerField(min_value=1, max_value=1000, required=False, default=1)
    refills = serializers.IntegerField(min_value=0, max_value=12, required=False, default=0)


def _medications_field(**kwargs):
    return MedicationSerializer(
        many=True,
        allow_empty=False,
        error_messages={"empty": MEDICATION_REQUIRED_MSG, "required": MEDICATION_REQUIRED_MSG},
        **kwargs,
    )


def _patient_field(**kwargs):
    return serializers.PrimaryKeyRelatedField(
        queryset=Patient.objects.filter(is_active=True),
        pk_field=serializers.UUIDField(),
        error_messages={"required": "Please select a patient", "does_not_exist": "Patient not found"},
        **kwargs,
    )


def _check_dates(start, end):
    if start and end and end <= start:
        raise serializers.ValidationError({"end_date": ["End date must be after start date"]})


class PrescriptionCreateSerializer(serializers.Serializer):
    patient = _patient_field()
    diagnosis = serializers.CharField(
        max_length=500,
        error_messages={"required": "Diagnosis is required", "blank": "Diagnosis is required"},
    )
    medications = _medications_field()
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
    start_date = serializers.DateField(required=False, default=date.today)
    end_date = serializers.DateField(required=False, allow_null=True, default=None)
    status = serializers.ChoiceField(
        choices=PrescriptionStatus.choices,
        required=False,
        default=PrescriptionStatus.ACTIVE,
    )

    def validate(self, attrs):
        _check_dates(attrs.get("start_date"), attrs.get("end_date"))
        return attrs


class PrescriptionUpdateSerializer(serializers.Serializer):
    """
    Partial update; start/end ordering against stored values is checked by
    PrescriptionService.
    """
    patient = _patient_field(required=False)
    diagnosis = serializers.CharField(max_length=500, required=False, error_messages={"blank": "Diagnosis is required"})
    medications = _medications_field(required=False)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=PrescriptionStatus.choices, required=False)

    def validate(self, attrs):
        _check_dates(attrs.get("start_date"), attrs.get("end_date"))
        return attrs


class PrescriptionSerializer(serializers.ModelSerializer):
    patient = PatientRefSerializer(read_only=True)
    doctor = UserRefSerializer(read_only=True)
    total_medications = serializers.IntegerField(read_only=True)
    total_days = serializers.IntegerField(read_only=True)
    is_expired = serializers.SerializerMethodField()
    can_be_renewed = serializers.SerializerMethodField()

    class Meta:
        model = Prescription
        fields = [
            "id",
            "prescription_number",
            "patient",
            "doctor",
            "diagnosis",
            "medications",
            "total_medications",
            "notes",
            "start_date",
            "end_date",
            "total_days",
            "is_expired",
            "can_be_renewed",
            "status",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_expired(self, obj) -> bool:
        return obj.is_expired()

    def get_can_be_renewed(self, obj) -> bool:
        return obj.can_be_renewed()
