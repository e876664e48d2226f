# hc_core/iam/models.py
import uuid

from django.conf import settings
from django.db import models


class UserProfile(models.Model):
    """
    Portal profile anchored to Django's AUTH_USER_MODEL.
    Role membership itself lives in Django Groups (see common.permissions).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="hc_profile")

    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    bio = models.TextField(max_length=1000, blank=True)

    # doctors
    specialization = models.CharField(max_length=128, blank=True)
    department = models.CharField(max_length=128, blank=True)
    license_number = models.CharField(max_length=64, blank=True)
    available_days = models.JSONField(default=list, blank=True)  # lowercase weekday names
    available_from = models.TimeField(null=True, blank=True)
    available_to = models.TimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_user_profile"

    def __str__(self) -> str:
        return f"{self.user.get_username()}"

    def is_available(self, day: str, at=None) -> bool:
        """
        Works on `day` (weekday name) and, when `at` is given, inside the
        from/to window. A missing window means all day.
        """
        if day.lower() not in {str(d).lower() for d in (self.available_days or [])}:
            return False
        if at is None or self.available_from is None or self.available_to is None:
            return True
        return self.available_from <= at < self.available_to
