import django_filters

from hc_core.appointments.models import Appointment, AppointmentStatus, ServiceType
from hc_core.common.api.filters import ResourceFilterSet


class AppointmentFilter(ResourceFilterSet):
    search_fields = ("reason", "notes", "patient__first_name", "patient__last_name", "patient__phone")
    date_field = "appointment_date"

    status = django_filters.ChoiceFilter(choices=AppointmentStatus.choices)
    service_type = django_filters.ChoiceFilter(choices=ServiceType.choices)
    patient = django_filters.UUIDFilter(field_name="patient_id")
    pharmacy = django_filters.UUIDFilter(field_name="pharmacy_id")

    class Meta:
        model = Appointment
        fields = ["status", "service_type", "patient", "pharmacy"]
