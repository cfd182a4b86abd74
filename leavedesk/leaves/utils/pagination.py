# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any, List, Mapping

from django.conf import settings
from django.core.paginator import EmptyPage
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from leaves.exceptions import ValidationError


class LeavePagination(PageNumberPagination):
    """
    ?page=&limit= pagination for the leave listings.
    - limit defaults to PAGE_SIZE and is clamped into 1..MAX_PAGE_SIZE (never an error
      unless it is not an integer); page must be >= 1.
    - A page past the end is an empty page with the real total, not a 404.
    - total and the page slice come from the same queryset (Django Paginator).
    """
    page_query_param = "page"
    page_size_query_param = "limit"   # ?limit=
    page_size = 10
    max_page_size = 100

    def __init__(self):
        cfg = getattr(settings, "LEAVE_WORKFLOW", {})
        self.page_size = int(cfg.get("PAGE_SIZE", self.page_size))
        self.max_page_size = int(cfg.get("MAX_PAGE_SIZE", self.max_page_size))
        self.items: List[Any] = []
        self.total = 0
        self.number = 1
        self.limit = self.page_size

    # ---- query params (no DB access)
    def page_number_from(self, params: Mapping[str, Any]) -> int:
        raw = params.get(self.page_query_param)
        if raw in (None, ""):
            return 1
        try:
            number = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"page must be an integer, got {raw!r}") from None
        if number < 1:
            raise ValidationError("page must be >= 1")
        return number

    def page_size_from(self, params: Mapping[str, Any]) -> int:
        raw = params.get(self.page_size_query_param)
        if raw in (None, ""):
            return self.page_size
        try:
            size = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"limit must be an integer, got {raw!r}") from None
        return max(1, min(size, self.max_page_size))

    def get_page_size(self, request):
        return self.page_size_from(request.query_params)

    # ---- slicing
    def paginate(self, queryset, number: int, limit: int) -> "LeavePagination":
        paginator = self.django_paginator_class(queryset, limit)
        self.number, self.limit = number, limit
        self.total = paginator.count
        try:
            self.page = paginator.page(number)
            self.items = list(self.page.object_list)
        except EmptyPage:
            self.page = None
            self.items = []
        return self

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        params = request.query_params
        return self.paginate(queryset, self.page_number_from(params), self.page_size_from(params)).items

    def get_paginated_response(self, data):
        return Response({
            "results": data,
            "total": self.total,
            "page": self.number,
            "limit": self.limit,
        })
