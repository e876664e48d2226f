from __future__ import annotations

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    """
    `?page=<n>&limit=<size>`; page size defaults to REST_FRAMEWORK["PAGE_SIZE"].

    Response contract:
      { success, data: [...], pagination: { page, limit, total, pages } }
    """
    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 500

    def get_paginated_response(self, data):
        return Response(
            {
                "success": True,
                "data": data,
                "pagination": self.get_pagination_meta(),
            }
        )

    def get_pagination_meta(self) -> dict:
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        return {
            "page": self.page.number,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if limit else 0,
        }

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "required": ["success", "data", "pagination"],
            "properties": {
                "success": {"type": "boolean", "example": True},
                "data": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer", "example": 1},
                        "limit": {"type": "integer", "example": 100},
                        "total": {"type": "integer", "example": 42},
                        "pages": {"type": "integer", "example": 1},
                    },
                },
            },
        }


def paginate(request, queryset, serializer_class, *, paginator: PageNumberPagination | None = None, view=None) -> Response:
    """
    Shared pagination helper for ViewSet-based list endpoints.
    """
    p = paginator or DefaultPagination()
    page = p.paginate_queryset(queryset, request, view=view)
    if page is not None:
        ser = serializer_class(page, many=True, context={"request": request})
        return p.get_paginated_response(ser.data)

    # If pagination is disabled for some reason, fall back to a non-paginated list.
    ser = serializer_class(queryset, many=True, context={"request": request})
    return Response({"success": True, "data": ser.data})
