"""
Pagination utilities for the project.

Lists are paged with `?page=<n>&size=<n>` (both 1-based and >= 1).  A page
past the end is simply empty; invalid values are rejected with the usual
aggregated 400 body.
"""
from django.conf import settings
from rest_framework import serializers
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


def _default_page_size():
    return getattr(settings, "EVENTS_DEFAULT_PAGE_SIZE", 20)


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(
        required=False,
        default=1,
        min_value=1,
        error_messages={
            "invalid": "Page must be greater than or equal to 1",
            "min_value": "Page must be greater than or equal to 1",
        },
    )
    size = serializers.IntegerField(
        required=False,
        default=_default_page_size,
        min_value=1,
        error_messages={
            "invalid": "Size must be greater than or equal to 1",
            "min_value": "Size must be greater than or equal to 1",
        },
    )


class PageSizePagination(BasePagination):
    """Slice a queryset by page/size and wrap the rows under `results_key`."""
    results_key = "results"

    def paginate_queryset(self, queryset, request, view=None):
        params = PageQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        self.page = params.validated_data["page"]
        self.size = params.validated_data["size"]
        offset = (self.page - 1) * self.size
        return list(queryset[offset:offset + self.size])

    def get_paginated_response(self, data):
        return Response({self.results_key: data, "page": self.page, "size": self.size})

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                self.results_key: schema,
                "page": {"type": "integer", "example": 1},
                "size": {"type": "integer", "example": 20},
            },
        }
