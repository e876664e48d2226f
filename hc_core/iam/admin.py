# hc_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from hc_core.iam.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "phone", "specialization", "is_active", "created_at", "updated_at")
    list_filter = ("is_active", "department")
    search_fields = ("user__username", "user__email", "phone", "specialization")
    ordering = ("-created_at",)
