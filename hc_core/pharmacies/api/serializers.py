# hc_core/pharmacies/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hc_core.common.validators import HOURS_ORDER_MSG, HOURS_REQUIRED_MSG, phone_error, time_range_error
from hc_core.pharmacies.models import WEEKDAYS, Pharmacy, PharmacyStatus


class _PharmacyWriteMixin:
    def _others(self):
        qs = Pharmacy.objects.all()
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        return qs

    def validate_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Pharmacy name must be at least 2 characters")
        if self._others().filter(name__iexact=value).exists():
            raise serializers.ValidationError("A pharmacy with this name already exists")
        return value

    def validate_license_number(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("License number is required")
        if self._others().filter(license_number=value).exists():
            raise serializers.ValidationError("A pharmacy with this license number already exists")
        return value

    def validate_phone(self, value):
        err = phone_error(value)
        if err:
            raise serializers.ValidationError(err)
        return value

    def validate_closed_days(self, value):
        days = [str(d).strip().lower() for d in value]
        bad = [d for d in days if d not in WEEKDAYS]
        if bad:
            raise serializers.ValidationError(f"Unknown weekday: {', '.join(bad)}")
        return sorted(set(days), key=WEEKDAYS.index)

    def validate_services(self, value):
        return [s.strip() for s in value if s and s.strip()]


class PharmacyCreateSerializer(_PharmacyWriteMixin, serializers.Serializer):
    name = serializers.CharField(max_length=100)
    address = serializers.CharField(max_length=100)
    city = serializers.CharField(max_length=50)
    state = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    zip_code = serializers.CharField(max_length=10, required=False, allow_blank=True, default="")
    country = serializers.CharField(max_length=50, required=False, default="Sri Lanka")
    phone = serializers.CharField(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    website = serializers.URLField(required=False, allow_blank=True, default="")
    pharmacist_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    license_number = serializers.CharField(max_length=64)
    opening_time = serializers.TimeField(required=False, allow_null=True, default=None)
    closing_time = serializers.TimeField(required=False, allow_null=True, default=None)
    is_24_hours = serializers.BooleanField(required=False, default=False)
    closed_days = serializers.ListField(child=serializers.CharField(max_length=16), required=False, default=list)
    services = serializers.ListField(child=serializers.CharField(max_length=100), required=False, default=list)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs.get("is_24_hours"):
            return attrs

        if attrs.get("opening_time") is None or attrs.get("closing_time") is None:
            raise serializers.ValidationError({"opening_time": [HOURS_REQUIRED_MSG]})
        if time_range_error(attrs["opening_time"], attrs["closing_time"]):
            raise serializers.ValidationError({"closing_time": [HOURS_ORDER_MSG]})
        return attrs


class PharmacyUpdateSerializer(_PharmacyWriteMixin, serializers.Serializer):
    """
    Partial update. The merged opening/closing pair is re-checked by PharmacyService.
    """
    name = serializers.CharField(max_length=100, required=False)
    address = serializers.CharField(max_length=100, required=False)
    city = serializers.CharField(max_length=50, required=False)
    state = serializers.CharField(max_length=50, required=False, allow_blank=True)
    zip_code = serializers.CharField(max_length=10, required=False, allow_blank=True)
    country = serializers.CharField(max_length=50, required=False)
    phone = serializers.CharField(max_length=32, required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    website = serializers.URLField(required=False, allow_blank=True)
    pharmacist_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    license_number = serializers.CharField(max_length=64, required=False)
    opening_time = serializers.TimeField(required=False, allow_null=True)
    closing_time = serializers.TimeField(required=False, allow_null=True)
    is_24_hours = serializers.BooleanField(required=False)
    closed_days = serializers.ListField(child=serializers.CharField(max_length=16), required=False)
    services = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=PharmacyStatus.choices, required=False)


class PharmacyRefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pharmacy
        fields = ["id", "name", "city", "phone"]
        read_only_fields = fields


class PharmacySerializer(serializers.ModelSerializer):
    opening_time = serializers.TimeField(format="%H:%M", read_only=True)
    closing_time = serializers.TimeField(format="%H:%M", read_only=True)
    is_open = serializers.SerializerMethodField()
    formatted_hours = serializers.CharField(read_only=True)
    full_address = serializers.CharField(read_only=True)

    class Meta:
        model = Pharmacy
        fields = [
            "id",
            "name",
            "address",
            "city",
            "state",
            "zip_code",
            "country",
            "full_address",
            "phone",
            "email",
            "website",
            "pharmacist_name",
            "license_number",
            "opening_time",
            "closing_time",
            "is_24_hours",
            "closed_days",
            "formatted_hours",
            "is_open",
            "services",
            "description",
            "status",
            "created_by",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_open(self, obj) -> bool:
        return obj.is_open()
