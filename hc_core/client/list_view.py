# hc_core/client/list_view.py
from __future__ import annotations

import logging
import math
from typing import Any, Sequence

from hc_core.client.transport import ApiClient, ApiError
from hc_core.common.filtering import FilterCriteria

logger = logging.getLogger(__name__)

FETCH_LIMIT = 500


class ResourceListView:
    """
    One collection page: fetch once, then narrow locally.

    The fetched list is canonical; `visible` is always recomputed from it
    and the current criteria, never mutated in place. Changing the search
    term, a filter or the date range sends the user back to page 1.
    """

    def __init__(
        self,
        client: ApiClient,
        resource: str,
        *,
        search_fields: Sequence[str] = (),
        filter_fields: Sequence[str] = (),
        date_field: str | None = None,
        page_size: int = 10,
        params: dict[str, Any] | None = None,
    ):
        self.client = client
        self.resource = resource.strip("/")
        self.search_fields = tuple(search_fields)
        self.filter_fields = tuple(filter_fields)
        self.date_field = date_field
        self.page_size = page_size
        self.params = dict(params or {})

        self.items: list[dict] = []
        self.criteria = FilterCriteria()
        self.page = 1
        self.loaded = False
        self.error: str | None = None
        self.action_error: str | None = None

    @property
    def path(self) -> str:
        return f"/{self.resource}/"

    # ----------------------------
    # Fetch
    # ----------------------------
    def load(self) -> bool:
        """
        GET every page of the collection. A failure leaves an empty list and
        a page-level error; there is no fallback to what was shown before.
        """
        items: list[dict] = []
        page = 1
        try:
            while True:
                body = self.client.get(self.path, {**self.params, "page": page, "limit": FETCH_LIMIT})
                items.extend(body.get("data") or [])
                pages = (body.get("pagination") or {}).get("pages") or 1
                if page >= pages:
                    break
                page += 1
        except ApiError as e:
            logger.warning("loading %s failed: %s", self.resource, e.message)
            self.items = []
            self.error = e.message
            self.loaded = True
            return False

        self.items = items
        self.error = None
        self.loaded = True
        self.page = 1
        return True

    # ----------------------------
    # Criteria (each change resets paging)
    # ----------------------------
    def _set_criteria(self, criteria: FilterCriteria) -> None:
        self.criteria = criteria
        self.page = 1

    def set_search(self, term: str | None) -> None:
        self._set_criteria(self.criteria.with_search(term))

    def set_filter(self, name: str, value: Any) -> None:
        if self.filter_fields and name not in self.filter_fields:
            raise KeyError(f"{name} is not filterable on {self.resource}")
        self._set_criteria(self.criteria.with_filter(name, value))

    def set_date_range(self, date_from: Any = None, date_to: Any = None) -> None:
        self._set_criteria(self.criteria.with_date_range(date_from, date_to))

    def clear_filters(self) -> None:
        self._set_criteria(self.criteria.cleared())

    # ----------------------------
    # Derived state
    # ----------------------------
    @property
    def visible(self) -> list[dict]:
        return self.criteria.apply(self.items, search_fields=self.search_fields, date_field=self.date_field)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(len(self.visible) / self.page_size))

    @property
    def page_items(self) -> list[dict]:
        start = (self.page - 1) * self.page_size
        return self.visible[start:start + self.page_size]

    @property
    def is_empty(self) -> bool:
        return self.loaded and not self.error and not self.visible

    def go_to_page(self, page: int) -> None:
        self.page = min(max(1, int(page)), self.total_pages)

    def next_page(self) -> None:
        self.go_to_page(self.page + 1)

    def previous_page(self) -> None:
        self.go_to_page(self.page - 1)

    # ----------------------------
    # Row actions
    # ----------------------------
    def select(self, item_id: Any) -> str:
        return f"/{self.resource}/{item_id}"

    def delete(self, item_id: Any) -> bool:
        """
        DELETE one row; on success drop it from the canonical list (no refetch).
        """
        try:
            self.client.delete(f"/{self.resource}/{item_id}/")
        except ApiError as e:
            self.action_error = e.message
            return False

        self.action_error = None
        self.items = [i for i in self.items if str(i.get("id")) != str(item_id)]
        self.go_to_page(self.page)
        return True


# search fields / filters per resource, matching the API FilterSets
LIST_CONFIG: dict[str, dict[str, Any]] = {
    "patients": {
        "search_fields": ("first_name", "last_name", "email", "phone", "nic"),
        "filter_fields": ("gender", "blood_type"),
        "date_field": "created_at",
    },
    "records": {
        "search_fields": ("title", "description", "doctor_notes", "patient.first_name", "patient.last_name"),
        "filter_fields": ("record_type", "status", "patient"),
        "date_field": "date",
    },
    "prescriptions": {
        "search_fields": ("prescription_number", "diagnosis", "notes", "patient.first_name", "patient.last_name"),
        "filter_fields": ("status", "patient"),
        "date_field": "start_date",
    },
    "appointments": {
        "search_fields": ("reason", "notes", "patient.first_name", "patient.last_name", "patient.phone"),
        "filter_fields": ("status", "service_type", "patient", "pharmacy"),
        "date_field": "appointment_date",
    },
    "pharmacies": {
        "search_fields": ("name", "address", "city", "pharmacist_name", "license_number", "phone"),
        "filter_fields": ("status", "city", "is_24_hours"),
        "date_field": "created_at",
    },
    "products": {
        "search_fields": ("name", "description", "manufacturer", "sku"),
        "filter_fields": ("category", "pharmacy", "requires_prescription"),
        "date_field": "created_at",
    },
    "orders": {
        "search_fields": ("order_number", "shipping_name", "delivery_address"),
        "filter_fields": ("status", "payment_status", "pharmacy"),
        "date_field": "created_at",
    },
}


def list_view_for(client: ApiClient, resource: str, **kwargs) -> ResourceListView:
    config = {**LIST_CONFIG[resource], **kwargs}
    return ResourceListView(client, resource, **config)
