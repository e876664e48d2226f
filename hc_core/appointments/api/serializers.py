# hc_core/appointments/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hc_core.appointments.models import Appointment, AppointmentStatus, ServiceType
from hc_core.common.validators import TIME_FORMAT_MSG, not_past_error
from hc_core.iam.api.serializers import UserRefSerializer
from hc_core.patients.api.serializers import PatientRefSerializer
from hc_core.patients.models import Patient
from hc_core.pharmacies.api.serializers import PharmacyRefSerializer
from hc_core.pharmacies.models import Pharmacy


def _time_field(**kwargs):
    return serializers.TimeField(
        format="%H:%M",
        input_formats=["%H:%M", "%H:%M:%S"],
        error_messages={"invalid": TIME_FORMAT_MSG, "required": "Appointment time is required"},
        **kwargs,
    )


def _duration_field(**kwargs):
    return serializers.IntegerField(
        min_value=15,
        max_value=120,
        error_messages={
            "min_value": "Duration must be at least 15 minutes",
            "max_value": "Duration cannot exceed 120 minutes",
        },
        **kwargs,
    )


class _AppointmentWriteMixin:
    def validate_appointment_date(self, value):
        # editing notes on an old appointment must not trip the date check
        if self.instance is not None and value == self.instance.appointment_date:
            return value
        err = not_past_error(value, label="Appointment date")
        if err:
            raise serializers.ValidationError(err)
        return value

    def validate_reason(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Reason for visit is required")
        return value


class AppointmentCreateSerializer(_AppointmentWriteMixin, serializers.Serializer):
    patient = serializers.PrimaryKeyRelatedField(
        queryset=Patient.objects.filter(is_active=True),
        pk_field=serializers.UUIDField(),
        error_messages={"required": "Please select a patient", "does_not_exist": "Patient not found"},
    )
    pharmacy = serializers.PrimaryKeyRelatedField(
        queryset=Pharmacy.objects.filter(is_active=True),
        pk_field=serializers.UUIDField(),
        required=False,
        allow_null=True,
        default=None,
    )
    appointment_date = serializers.DateField(error_messages={"required": "Appointment date is required"})
    appointment_time = _time_field()
    duration = _duration_field(required=False, default=30)
    service_type = serializers.ChoiceField(
        choices=ServiceType.choices,
        required=False,
        default=ServiceType.CONSULTATION,
    )
    reason = serializers.CharField(
        max_length=500,
        error_messages={"required": "Reason for visit is required", "blank": "Reason for visit is required"},
    )
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")


class AppointmentUpdateSerializer(_AppointmentWriteMixin, serializers.Serializer):
    patient = serializers.PrimaryKeyRelatedField(
        queryset=Patient.objects.filter(is_active=True),
        pk_field=serializers.UUIDField(),
        required=False,
    )
    pharmacy = serializers.PrimaryKeyRelatedField(
        queryset=Pharmacy.objects.filter(is_active=True),
        pk_field=serializers.UUIDField(),
        required=False,
        allow_null=True,
    )
    appointment_date = serializers.DateField(required=False)
    appointment_time = _time_field(required=False)
    duration = _duration_field(required=False)
    service_type = serializers.ChoiceField(choices=ServiceType.choices, required=False)
    status = serializers.ChoiceField(choices=AppointmentStatus.choices, required=False)
    reason = serializers.CharField(max_length=500, required=False, error_messages={"blank": "Reason for visit is required"})
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class AppointmentSerializer(serializers.ModelSerializer):
    patient = PatientRefSerializer(read_only=True)
    provider = UserRefSerializer(read_only=True)
    pharmacy = PharmacyRefSerializer(read_only=True)
    appointment_time = serializers.TimeField(format="%H:%M", read_only=True)
    formatted_duration = serializers.CharField(read_only=True)
    is_today = serializers.SerializerMethodField()
    is_past = serializers.SerializerMethodField()
    is_upcoming = serializers.SerializerMethodField()

    class Meta:
        model = Appointment
        fields = [
            "id",
            "patient",
            "provider",
            "pharmacy",
            "appointment_date",
            "appointment_time",
            "duration",
            "formatted_duration",
            "service_type",
            "status",
            "reason",
            "notes",
            "is_today",
            "is_past",
            "is_upcoming",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_today(self, obj) -> bool:
        return obj.is_today()

    def get_is_past(self, obj) -> bool:
        return obj.is_past()

    def get_is_upcoming(self, obj) -> bool:
        return obj.is_upcoming()
