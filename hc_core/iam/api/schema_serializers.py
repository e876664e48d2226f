# hc_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers

from hc_core.common.validators import WEEKDAYS, phone_error
from hc_core.iam.services.accounts import SELF_SERVICE_ROLES


class LoginRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class RegisterRequestSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    role = serializers.ChoiceField(choices=[(r, r.title()) for r in SELF_SERVICE_ROLES])
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    specialization = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")

    def validate_phone(self, value):
        err = phone_error(value)
        if err:
            raise serializers.ValidationError(err)
        return value


class MeUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField(allow_null=True, required=False)
    email = serializers.EmailField(allow_null=True, required=False)
    first_name = serializers.CharField(allow_blank=True, required=False)
    last_name = serializers.CharField(allow_blank=True, required=False)
    is_superuser = serializers.BooleanField()


class MeResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    role = serializers.CharField(allow_null=True)
    roles = serializers.ListField(child=serializers.CharField())
    profile = serializers.DictField(allow_null=True)


NAME_LENGTH_MSG = "Name must be between 2 and 100 characters"


class ProfileUpdateSerializer(serializers.Serializer):
    """
    PUT and PATCH /me/ both merge: only the keys sent are changed.
    """
    first_name = serializers.CharField(max_length=150, required=False)
    last_name = serializers.CharField(max_length=150, required=False)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    bio = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    specialization = serializers.CharField(max_length=128, required=False, allow_blank=True)
    department = serializers.CharField(max_length=128, required=False, allow_blank=True)
    available_days = serializers.ListField(child=serializers.CharField(max_length=16), required=False)
    available_from = serializers.TimeField(required=False, allow_null=True)
    available_to = serializers.TimeField(required=False, allow_null=True)

    def _name(self, value):
        value = value.strip()
        if not 2 <= len(value) <= 100:
            raise serializers.ValidationError(NAME_LENGTH_MSG)
        return value

    def validate_first_name(self, value):
        return self._name(value)

    def validate_last_name(self, value):
        return self._name(value)

    def validate_phone(self, value):
        err = phone_error(value)
        if err:
            raise serializers.ValidationError(err)
        return value

    def validate_available_days(self, value):
        days = [str(d).strip().lower() for d in value]
        bad = [d for d in days if d not in WEEKDAYS]
        if bad:
            raise serializers.ValidationError(f"Unknown weekday: {', '.join(bad)}")
        return sorted(set(days), key=WEEKDAYS.index)
