# views/utils.py
"""
drf-spectacular helpers shared by the leave views.
    from .utils import (
        extend_schema, extend_schema_view, OpenApiExample, OpenApiResponse,
        path_int, q_int, q_str, q_date, std_errors,
    )
"""
from drf_spectacular.utils import (
    extend_schema, extend_schema_view,
    OpenApiParameter, OpenApiExample, OpenApiResponse, inline_serializer,
)
from drf_spectacular.types import OpenApiTypes
from rest_framework import serializers

# ---- Body of every workflow error response: {"detail": "..."}
ErrorSerializer = inline_serializer(
    name="LeaveError",
    fields={"detail": serializers.CharField()}
)

# ---- Param helpers

def path_int(name: str, description: str):
    return OpenApiParameter(name, OpenApiTypes.INT, OpenApiParameter.PATH, description=description)

def q_int(name: str, description: str):
    return OpenApiParameter(name, OpenApiTypes.INT, OpenApiParameter.QUERY, required=False, description=description)

def q_str(name: str, description: str):
    return OpenApiParameter(name, OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description=description)

def q_date(name: str, description: str):
    return OpenApiParameter(name, OpenApiTypes.DATE, OpenApiParameter.QUERY, required=False, description=description)


def std_errors(extra: dict | None = None):
    """400/401/403/404 mapping; `extra` adds or overrides codes (409, 503...)."""
    errs = {
        400: OpenApiResponse(ErrorSerializer, description="Invalid input or leave policy violation"),
        401: OpenApiResponse(ErrorSerializer, description="Not authenticated"),
        403: OpenApiResponse(ErrorSerializer, description="Outside the caller's role or division"),
        404: OpenApiResponse(ErrorSerializer, description="Application / employee not found"),
    }
    for code, resp in (extra or {}).items():
        if resp.response is None:
            resp = OpenApiResponse(ErrorSerializer, description=resp.description)
        errs[code] = resp
    return errs
