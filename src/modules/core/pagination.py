"""Page-number pagination with an explicit, bounded ``limit``."""

from __future__ import annotations

from rest_framework.exceptions import ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

MAX_PAGE_SIZE = 100


class StandardResultsSetPagination(PageNumberPagination):
    """``?page=N&limit=M`` pagination.

    Unlike DRF's default clamping, an out-of-range ``limit`` or ``page`` is a
    client error (400) rather than a silently adjusted page.
    """

    page_size_query_param = "limit"
    max_page_size = MAX_PAGE_SIZE

    def get_page_size(self, request) -> int:
        raw = request.query_params.get(self.page_size_query_param)
        if raw is None:
            return self.page_size
        limit = _parse_positive_int(raw, "limit")
        if limit > self.max_page_size:
            raise ValidationError(
                {"limit": f"Must be between 1 and {self.max_page_size}."}
            )
        return limit

    def paginate_queryset(self, queryset, request, view=None):
        raw_page = request.query_params.get(self.page_query_param)
        if raw_page is not None:
            _parse_positive_int(raw_page, "page")
        return super().paginate_queryset(queryset, request, view)

    def get_paginated_response(self, data) -> Response:
        paginator = self.page.paginator
        return Response(
            {
                "count": paginator.count,
                "page": self.page.number,
                "limit": paginator.per_page,
                "total_pages": paginator.num_pages,
                "has_next": self.page.has_next(),
                "has_prev": self.page.has_previous(),
                "next": self.get_next_link(),
                "previous": self.get_previous_link(),
                "results": data,
            }
        )


def _parse_positive_int(raw: str, name: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: "Must be a positive integer."}) from None
    if value < 1:
        raise ValidationError({name: "Must be a positive integer."})
    return value
