# fs_core/common/api/pagination.py
from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = "page_size"
    max_page_size = 500


def paginate(request, queryset, serializer_class, *, paginator: PageNumberPagination | None = None) -> Response:
    """
    Shared pagination helper with a stable contract:
      { count, next, previous, results }
    """
    p = paginator or DefaultPagination()
    context = {"request": request}
    page = p.paginate_queryset(queryset, request)
    if page is not None:
        ser = serializer_class(page, many=True, context=context)
        return p.get_paginated_response(ser.data)

    ser = serializer_class(queryset, many=True, context=context)
    return Response(ser.data)
