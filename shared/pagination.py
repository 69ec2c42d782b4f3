"""Page/limit pagination shared by the listing and booking endpoints."""

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination  # type: ignore
from rest_framework.response import Response  # type: ignore


class PageLimitPagination(PageNumberPagination):
    """Paginate with ``?page=&limit=`` and describe neighbouring pages.

    The response carries the number of items on the current page
    (``count``), the number of matching records (``total``) and a
    ``pagination`` object whose ``next``/``prev`` keys are present only
    when such a page exists.
    """

    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 100

    def get_page_descriptors(self) -> dict:
        limit = self.page.paginator.per_page
        descriptors: dict = {}
        if self.page.has_next():
            descriptors["next"] = {"page": self.page.next_page_number(), "limit": limit}
        if self.page.has_previous():
            descriptors["prev"] = {"page": self.page.previous_page_number(), "limit": limit}
        return descriptors

    def get_paginated_response(self, data):
        return Response(
            {
                "success": True,
                "count": len(data),
                "total": self.page.paginator.count,
                "pagination": self.get_page_descriptors(),
                "data": data,
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "count": {"type": "integer"},
                "total": {"type": "integer"},
                "pagination": {"type": "object"},
                "data": schema,
            },
        }
