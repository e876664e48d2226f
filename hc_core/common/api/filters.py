# hc_core/common/api/filters.py
from __future__ import annotations

from functools import reduce
from operator import or_

import django_filters
from django.db.models import Q


class ResourceFilterSet(django_filters.FilterSet):
    """
    Server-side counterpart of hc_core.common.filtering.FilterCriteria.

    Subclasses set:
      search_fields: ORM paths searched with icontains, OR'd together
      date_field:    ORM path compared by date_from / date_to (inclusive)
    and declare their exact-match filters as regular FilterSet fields.
    """
    search_fields: tuple[str, ...] = ()
    date_field: str | None = None

    search = django_filters.CharFilter(method="filter_search")
    date_from = django_filters.DateFilter(method="filter_date_from")
    date_to = django_filters.DateFilter(method="filter_date_to")

    def filter_search(self, queryset, name, value):
        term = (value or "").strip()
        if not term or not self.search_fields:
            return queryset
        q = reduce(or_, (Q(**{f"{f}__icontains": term}) for f in self.search_fields))
        return queryset.filter(q)

    def _date_lookup(self) -> str:
        # DateTimeFields are compared on their date part
        model_field = self._meta.model._meta.get_field(self.date_field.split("__")[0])
        if model_field.get_internal_type() == "DateTimeField":
            return f"{self.date_field}__date"
        return self.date_field

    def filter_date_from(self, queryset, name, value):
        if not value or not self.date_field:
            return queryset
        return queryset.filter(**{f"{self._date_lookup()}__gte": value})

    def filter_date_to(self, queryset, name, value):
        if not value or not self.date_field:
            return queryset
        return queryset.filter(**{f"{self._date_lookup()}__lte": value})
