import django_filters

from hc_core.common.api.filters import ResourceFilterSet
from hc_core.pharmacies.models import Pharmacy, PharmacyStatus


class PharmacyFilter(ResourceFilterSet):
    search_fields = ("name", "address", "city", "pharmacist_name", "license_number", "phone")
    date_field = "created_at"

    status = django_filters.ChoiceFilter(choices=PharmacyStatus.choices)
    city = django_filters.CharFilter(field_name="city", lookup_expr="iexact")
    is_24_hours = django_filters.BooleanFilter()

    class Meta:
        model = Pharmacy
        fields = ["status", "city", "is_24_hours"]
