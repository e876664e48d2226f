# hc_core/patients/admin.py
from django.contrib import admin

from hc_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "nic", "phone", "gender", "is_active", "created_at")
    list_filter = ("gender", "blood_type", "is_active")
    search_fields = ("first_name", "last_name", "nic", "phone", "email")
    ordering = ("-created_at",)
