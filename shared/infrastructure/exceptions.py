"""API error rendering.

Every error leaving the API has the shape
``{"error": "<message>", "statusCode": <int>}``; validation errors also
carry the per-field messages under ``details``.
"""

from __future__ import annotations

import structlog
from django.http import JsonResponse  # type: ignore
from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

logger = structlog.get_logger(__name__)


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource conflict."
    default_code = "conflict"


def _first_message(detail) -> str:
    """Dig the first human readable message out of DRF error detail."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ""
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def api_exception_handler(exc, context):  # type: ignore
    response = exception_handler(exc, context)
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else None

    if response is None:
        logger.error("api.unhandled_error", view=view_name, error=str(exc), exc_info=exc)
        return Response(
            {"error": "Internal server error", "statusCode": status.HTTP_500_INTERNAL_SERVER_ERROR},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    payload = {
        "error": _first_message(response.data),
        "statusCode": response.status_code,
    }
    if isinstance(exc, exceptions.ValidationError) and isinstance(response.data, dict):
        payload["details"] = response.data

    if response.status_code >= 500:
        logger.error("api.error", view=view_name, status=response.status_code, error=payload["error"])
    else:
        logger.info("api.client_error", view=view_name, status=response.status_code, error=payload["error"])

    response.data = payload
    return response


def api_not_found(request, exception=None):  # type: ignore
    """JSON 404 for unknown routes."""
    return JsonResponse(
        {"error": f"Route {request.method} {request.path} not found", "statusCode": 404},
        status=404,
    )
