# hc_core/common/filtering.py
"""
Filter criteria shared by the list views and the API.

A FilterCriteria holds a free-text search term, exact-match field filters and
an optional inclusive date range. It serializes to the same query parameters
the server-side FilterSets accept (`search`, `<field>`, `date_from`,
`date_to`), and `apply()` narrows an already-fetched collection with the
same semantics:

  - search: case-insensitive substring, OR'd across the search fields
  - filters: exact match, AND'd with each other
  - date range: inclusive on both ends, on one designated date field

All predicates are conjunctive, so the order they run in does not matter and
adding a predicate can only shrink the result.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from hc_core.common.validators import parse_date

SEARCH_PARAM = "search"
DATE_FROM_PARAM = "date_from"
DATE_TO_PARAM = "date_to"
RESERVED_PARAMS = {SEARCH_PARAM, DATE_FROM_PARAM, DATE_TO_PARAM, "page", "limit"}


def resolve(item: Any, path: str) -> Any:
    """
    Read a dotted path ("patient.first_name") from nested mappings/objects.
    """
    current = item
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
    return current


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping) and "id" in value:
        # expanded reference: compare on its id
        return str(value["id"])
    return str(value)


@dataclass(frozen=True)
class FilterCriteria:
    search: str = ""
    filters: Mapping[str, str] = field(default_factory=dict)
    date_from: date | None = None
    date_to: date | None = None

    # ----------------------------
    # Builders (each returns a new criteria)
    # ----------------------------
    def with_search(self, term: str | None) -> "FilterCriteria":
        return replace(self, search=(term or "").strip())

    def with_filter(self, name: str, value: Any) -> "FilterCriteria":
        filters = dict(self.filters)
        if value is None or value == "":
            filters.pop(name, None)
        else:
            filters[name] = _normalize(value)
        return replace(self, filters=filters)

    def with_date_range(self, date_from: Any = None, date_to: Any = None) -> "FilterCriteria":
        return replace(self, date_from=parse_date(date_from), date_to=parse_date(date_to))

    def cleared(self) -> "FilterCriteria":
        return FilterCriteria()

    @property
    def is_empty(self) -> bool:
        return not (self.search or self.filters or self.date_from or self.date_to)

    # ----------------------------
    # Query-string form
    # ----------------------------
    def to_query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.search:
            params[SEARCH_PARAM] = self.search
        for name, value in sorted(self.filters.items()):
            params[name] = value
        if self.date_from:
            params[DATE_FROM_PARAM] = self.date_from.isoformat()
        if self.date_to:
            params[DATE_TO_PARAM] = self.date_to.isoformat()
        return params

    @classmethod
    def from_query_params(
        cls,
        params: Mapping[str, Any],
        filter_fields: Iterable[str] | None = None,
    ) -> "FilterCriteria":
        allowed = set(filter_fields) if filter_fields is not None else None
        filters = {
            k: _normalize(v)
            for k, v in params.items()
            if k not in RESERVED_PARAMS and v not in (None, "") and (allowed is None or k in allowed)
        }
        return cls(
            search=(params.get(SEARCH_PARAM) or "").strip(),
            filters=filters,
            date_from=parse_date(params.get(DATE_FROM_PARAM)),
            date_to=parse_date(params.get(DATE_TO_PARAM)),
        )

    # ----------------------------
    # In-memory evaluation
    # ----------------------------
    def matches(self, item: Any, *, search_fields: Sequence[str] = (), date_field: str | None = None) -> bool:
        if self.search:
            needle = self.search.lower()
            if not any(needle in _normalize(resolve(item, f)).lower() for f in search_fields):
                return False

        for name, expected in self.filters.items():
            if _normalize(resolve(item, name)) != expected:
                return False

        if (self.date_from or self.date_to) and date_field:
            d = parse_date(resolve(item, date_field))
            if d is None:
                return False
            if self.date_from and d < self.date_from:
                return False
            if self.date_to and d > self.date_to:
                return False

        return True

    def apply(
        self,
        items: Iterable[Any],
        *,
        search_fields: Sequence[str] = (),
        date_field: str | None = None,
    ) -> list[Any]:
        return [i for i in items if self.matches(i, search_fields=search_fields, date_field=date_field)]
