# hc_core/iam/services/accounts.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.exceptions import ValidationError
from django.db import transaction

from hc_core.audit.services import AuditService
from hc_core.common.permissions import ROLE_DOCTOR, ROLE_PATIENT, ROLE_PHARMACIST
from hc_core.iam.models import UserProfile

SELF_SERVICE_ROLES = (ROLE_DOCTOR, ROLE_PHARMACIST, ROLE_PATIENT)


class AccountService:
    @staticmethod
    @transaction.atomic
    def register(
        *,
        username: str,
        email: str,
        password: str,
        role: str,
        first_name: str = "",
        last_name: str = "",
        phone: str = "",
        specialization: str = "",
    ):
        """
        Self sign-up. ADMIN can never be chosen here.
        """
        if role not in SELF_SERVICE_ROLES:
            raise ValidationError({"role": f"Role must be one of {', '.join(SELF_SERVICE_ROLES)}."})

        User = get_user_model()
        if User.objects.filter(username__iexact=username).exists():
            raise ValidationError({"username": "A user with this username already exists."})
        if email and User.objects.filter(email__iexact=email).exists():
            raise ValidationError({"email": "A user with this email already exists."})

        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)

        profile = UserProfile.objects.create(user=user, phone=phone or "", specialization=specialization or "")

        AuditService.log(
            event_code="user.registered",
            entity_type="UserProfile",
            entity_id=profile.id,
            actor_user_id=user.id,
            metadata={"role": role},
        )
        return user

    # profile fields a user may edit on themselves
    USER_FIELDS = frozenset({"first_name", "last_name"})
    PROFILE_FIELDS = frozenset(
        {
            "phone",
            "address",
            "bio",
            "specialization",
            "department",
            "available_days",
            "available_from",
            "available_to",
        }
    )

    @staticmethod
    @transaction.atomic
    def update_profile(*, user, data: dict):
        """
        Merge `data` into the user and their portal profile. Unchanged values
        write nothing; any change is audited as profile.updated.
        """
        profile, _ = UserProfile.objects.get_or_create(user=user)

        user_changes = {
            k: v for k, v in data.items() if k in AccountService.USER_FIELDS and getattr(user, k) != v
        }
        profile_changes = {
            k: v for k, v in data.items() if k in AccountService.PROFILE_FIELDS and getattr(profile, k) != v
        }

        start = profile_changes.get("available_from", profile.available_from)
        end = profile_changes.get("available_to", profile.available_to)
        if start is not None and end is not None and start >= end:
            raise ValidationError({"available_to": ["Available from must be before available to"]})

        if not user_changes and not profile_changes:
            return profile

        if user_changes:
            for k, v in user_changes.items():
                setattr(user, k, v)
            user.save(update_fields=sorted(user_changes))
        if profile_changes:
            for k, v in profile_changes.items():
                setattr(profile, k, v)
            profile.save()

        AuditService.log(
            event_code="profile.updated",
            entity_type="UserProfile",
            entity_id=profile.id,
            actor_user_id=user.id,
            metadata={"updated_fields": sorted({*user_changes, *profile_changes})},
        )
        return profile
