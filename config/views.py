import structlog
from django.db import DatabaseError, connection  # type: ignore
from django.http import JsonResponse  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from django.views.decorators.http import require_http_methods  # type: ignore

logger = structlog.get_logger(__name__)


@csrf_exempt
@require_http_methods(["GET"])
def healthz(request):  # type: ignore
    """Health check for load balancers and containers."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        logger.error("healthz.fail", error=str(exc))
        return JsonResponse({"status": "unhealthy", "error": str(exc)}, status=503)
    return JsonResponse({"status": "ok", "database": "connected"})
