import django_filters

from hc_core.common.api.filters import ResourceFilterSet
from hc_core.records.models import MedicalRecord, RecordStatus, RecordType


class MedicalRecordFilter(ResourceFilterSet):
    search_fields = ("title", "description", "doctor_notes", "patient__first_name", "patient__last_name")
    date_field = "date"

    record_type = django_filters.ChoiceFilter(choices=RecordType.choices)
    status = django_filters.ChoiceFilter(choices=RecordStatus.choices)
    patient = django_filters.UUIDFilter(field_name="patient_id")

    class Meta:
        model = MedicalRecord
        fields = ["record_type", "status", "patient"]
