"""Pagination used by list endpoints.

Clients pass ``?page=`` and ``?limit=``; responses carry the page of
items under ``data`` and the paging metadata under ``pagination``.
"""

from __future__ import annotations

import math

from rest_framework.pagination import PageNumberPagination  # type: ignore
from rest_framework.response import Response  # type: ignore


class StandardPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):  # type: ignore
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        page = self.page.number
        total_pages = math.ceil(total / limit) if limit else 0
        return Response(
            {
                "data": data,
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "totalPages": total_pages,
                    "hasNext": self.page.has_next(),
                    "hasPrev": self.page.has_previous(),
                },
            }
        )

    def get_paginated_response_schema(self, schema):  # type: ignore
        return {
            "type": "object",
            "properties": {
                "data": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total": {"type": "integer"},
                        "totalPages": {"type": "integer"},
                        "hasNext": {"type": "boolean"},
                        "hasPrev": {"type": "boolean"},
                    },
                },
            },
        }
