# hc_core/iam/api/serializers.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class UserRefSerializer(serializers.ModelSerializer):
    """
    Compact user shape for expanded references (doctor, provider, customer).
    """
    full_name = serializers.SerializerMethodField()
    specialization = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "first_name", "last_name", "full_name", "email", "specialization"]
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        return obj.get_full_name() or obj.get_username()

    def get_specialization(self, obj) -> str:
        profile = getattr(obj, "hc_profile", None)
        return profile.specialization if profile else ""


class DoctorSerializer(serializers.ModelSerializer):
    full_name = serializers.SerializerMethodField()
    phone = serializers.CharField(source="hc_profile.phone", read_only=True, default="")
    specialization = serializers.CharField(source="hc_profile.specialization", read_only=True, default="")
    department = serializers.CharField(source="hc_profile.department", read_only=True, default="")
    bio = serializers.CharField(source="hc_profile.bio", read_only=True, default="")
    available_days = serializers.ListField(source="hc_profile.available_days", read_only=True, default=list)
    available_from = serializers.TimeField(source="hc_profile.available_from", format="%H:%M", read_only=True, default=None)
    available_to = serializers.TimeField(source="hc_profile.available_to", format="%H:%M", read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "specialization",
            "department",
            "bio",
            "available_days",
            "available_from",
            "available_to",
        ]
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        return obj.get_full_name() or obj.get_username()
