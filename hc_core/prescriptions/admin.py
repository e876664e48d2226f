from django.contrib import admin

from hc_core.prescriptions.models import Prescription


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ("prescription_number", "patient", "doctor", "start_date", "end_date", "status", "is_active")
    list_filter = ("status", "is_active")
    search_fields = ("prescription_number", "diagnosis", "patient__first_name", "patient__last_name")
    readonly_fields = ("prescription_number",)
    ordering = ("-created_at",)
