# hc_core/iam/filters.py
import django_filters
from django.contrib.auth import get_user_model

from hc_core.common.api.filters import ResourceFilterSet


class DoctorFilter(ResourceFilterSet):
    search_fields = (
        "first_name",
        "last_name",
        "email",
        "hc_profile__specialization",
        "hc_profile__department",
    )

    specialization = django_filters.CharFilter(field_name="hc_profile__specialization", lookup_expr="icontains")
    department = django_filters.CharFilter(field_name="hc_profile__department", lookup_expr="icontains")

    class Meta:
        model = get_user_model()
        fields = ["specialization", "department"]
