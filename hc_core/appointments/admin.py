from django.contrib import admin

from hc_core.appointments.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("patient", "provider", "appointment_date", "appointment_time", "service_type", "status")
    list_filter = ("status", "service_type", "is_active")
    search_fields = ("reason", "patient__first_name", "patient__last_name")
    date_hierarchy = "appointment_date"
    ordering = ("-appointment_date", "-appointment_time")
