# hc_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hc_core.common.permissions import primary_role, user_roles
from hc_core.iam.api.schema_serializers import MeResponseSerializer, ProfileUpdateSerializer
from hc_core.iam.models import UserProfile
from hc_core.iam.services.accounts import AccountService


def _time(value):
    return value.strftime("%H:%M") if value is not None else None


def me_payload(user) -> dict:
    profile = UserProfile.objects.filter(user=user).first()
    return {
        "user": {
            "id": user.id,
            "username": getattr(user, "username", None),
            "email": getattr(user, "email", None),
            "first_name": getattr(user, "first_name", ""),
            "last_name": getattr(user, "last_name", ""),
            "is_superuser": bool(getattr(user, "is_superuser", False)),
        },
        "role": primary_role(user),
        "roles": sorted(user_roles(user)),
        "profile": (
            {
                "id": str(profile.id),
                "phone": profile.phone,
                "address": profile.address,
                "bio": profile.bio,
                "specialization": profile.specialization,
                "department": profile.department,
                "license_number": profile.license_number,
                "available_days": profile.available_days,
                "available_from": _time(profile.available_from),
                "available_to": _time(profile.available_to),
            }
            if profile
            else None
        ),
    }


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        """
        Returns the authenticated user, their role(s) and portal profile.
        """
        return Response(me_payload(request.user), status=status.HTTP_200_OK)

    @extend_schema(request=ProfileUpdateSerializer, responses={200: MeResponseSerializer}, tags=["IAM"])
    def patch(self, request):
        ser = ProfileUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        AccountService.update_profile(user=request.user, data=ser.validated_data)
        return Response(me_payload(request.user), status=status.HTTP_200_OK)

    put = patch
