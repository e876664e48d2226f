# hc_core/patients/filters.py
import django_filters

from hc_core.common.api.filters import ResourceFilterSet
from hc_core.patients.models import BloodType, Gender, Patient


class PatientFilter(ResourceFilterSet):
    search_fields = ("first_name", "last_name", "email", "phone", "nic")
    date_field = "created_at"

    gender = django_filters.ChoiceFilter(choices=Gender.choices)
    blood_type = django_filters.ChoiceFilter(choices=BloodType.choices)

    class Meta:
        model = Patient
        fields = ["gender", "blood_type"]
