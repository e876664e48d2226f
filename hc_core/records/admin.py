from django.contrib import admin

from hc_core.records.models import MedicalRecord


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ("title", "record_type", "patient", "doctor", "date", "status", "is_active")
    list_filter = ("record_type", "status", "is_active")
    search_fields = ("title", "description", "patient__first_name", "patient__last_name")
    date_hierarchy = "date"
    ordering = ("-date",)
