from django.contrib import admin

from hc_core.pharmacies.models import Pharmacy


@admin.register(Pharmacy)
class PharmacyAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "license_number", "status", "is_24_hours", "is_active", "created_by")
    list_filter = ("status", "is_24_hours", "is_active", "city")
    search_fields = ("name", "license_number", "pharmacist_name", "city")
    ordering = ("name",)
