# hc_core/patients/api/serializers.py
from __future__ import annotations

from datetime import date

from rest_framework import serializers

from hc_core.common.display import calculate_age
from hc_core.common.validators import nic_error, not_future_error, phone_error
from hc_core.patients.models import BloodType, Gender, Patient


class _PatientWriteMixin:
    def validate_first_name(self, value):
        if len(value.strip()) < 2:
            raise serializers.ValidationError("First name must be at least 2 characters")
        return value.strip()

    def validate_last_name(self, value):
        if len(value.strip()) < 2:
            raise serializers.ValidationError("Last name must be at least 2 characters")
        return value.strip()

    def validate_phone(self, value):
        err = phone_error(value)
        if err:
            raise serializers.ValidationError(err)
        return value

    def validate_emergency_contact_phone(self, value):
        return self.validate_phone(value)

    def validate_nic(self, value):
        if not value:
            return None
        err = nic_error(value)
        if err:
            raise serializers.ValidationError(err)
        return value.strip().upper()

    def validate_date_of_birth(self, value):
        err = not_future_error(value, label="Date of birth")
        if err:
            raise serializers.ValidationError(err)
        return value

    def validate_allergies(self, value):
        return [a.strip() for a in value if a and a.strip()]


class PatientCreateSerializer(_PatientWriteMixin, serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=32)
    nic = serializers.CharField(max_length=12, required=False, allow_blank=True, allow_null=True, default=None)
    date_of_birth = serializers.DateField()
    gender = serializers.ChoiceField(choices=Gender.choices)
    blood_type = serializers.ChoiceField(choices=BloodType.choices, required=False, allow_blank=True, default="")
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    allergies = serializers.ListField(child=serializers.CharField(max_length=100), required=False, default=list)
    height_cm = serializers.DecimalField(
        max_digits=5, decimal_places=1, min_value=30, max_value=250, required=False, allow_null=True, default=None
    )
    weight_kg = serializers.DecimalField(
        max_digits=5, decimal_places=1, min_value=1, max_value=300, required=False, allow_null=True, default=None
    )
    emergency_contact_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    emergency_contact_phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")


class PatientUpdateSerializer(_PatientWriteMixin, serializers.Serializer):
    """
    Partial update contract (PUT and PATCH both merge).
    """
    first_name = serializers.CharField(max_length=100, required=False)
    last_name = serializers.CharField(max_length=100, required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=32, required=False)
    nic = serializers.CharField(max_length=12, required=False, allow_blank=True, allow_null=True)
    date_of_birth = serializers.DateField(required=False)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False)
    blood_type = serializers.ChoiceField(choices=BloodType.choices, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    allergies = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    height_cm = serializers.DecimalField(
        max_digits=5, decimal_places=1, min_value=30, max_value=250, required=False, allow_null=True
    )
    weight_kg = serializers.DecimalField(
        max_digits=5, decimal_places=1, min_value=1, max_value=300, required=False, allow_null=True
    )
    emergency_contact_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    emergency_contact_phone = serializers.CharField(max_length=32, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class PatientRefSerializer(serializers.ModelSerializer):
    """
    Compact patient shape embedded in records, prescriptions and appointments.
    """
    age = serializers.IntegerField(read_only=True)

    class Meta:
        model = Patient
        fields = ["id", "first_name", "last_name", "nic", "phone", "email", "gender", "date_of_birth", "age"]
        read_only_fields = fields


class PatientSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    age = serializers.SerializerMethodField()
    bmi = serializers.FloatField(read_only=True)

    class Meta:
        model = Patient
        fields = [
            "id",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "nic",
            "date_of_birth",
            "age",
            "gender",
            "blood_type",
            "address",
            "allergies",
            "height_cm",
            "weight_kg",
            "bmi",
            "emergency_contact_name",
            "emergency_contact_phone",
            "created_by",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_age(self, obj) -> int | None:
        today = self.context.get("today") or date.today()
        return calculate_age(obj.date_of_birth, today)
