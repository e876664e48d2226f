import django_filters

from hc_core.common.api.filters import ResourceFilterSet
from hc_core.prescriptions.models import Prescription, PrescriptionStatus


class PrescriptionFilter(ResourceFilterSet):
    search_fields = ("prescription_number", "diagnosis", "notes", "patient__first_name", "patient__last_name")
    date_field = "start_date"

    status = django_filters.ChoiceFilter(choices=PrescriptionStatus.choices)
    patient = django_filters.UUIDFilter(field_name="patient_id")

    class Meta:
        model = Prescription
        fields = ["status", "patient"]
