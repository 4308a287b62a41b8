"""API views for staff reports.

Each view answers JSON by default and a CSV attachment with
``?format=csv``.
"""

from __future__ import annotations

import structlog
from django.utils import timezone  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.settings import api_settings  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.analytics.services import month_start
from apps.users.permissions import IsAdminOrManager
from shared.infrastructure.params import period_from_params
from shared.infrastructure.renderers import CSVRenderer

from . import services

logger = structlog.get_logger(__name__)


class ReportView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrManager]
    renderer_classes = [*api_settings.DEFAULT_RENDERER_CLASSES, CSVRenderer]

    def get_report(self, request) -> services.Report:  # type: ignore
        raise NotImplementedError

    def get(self, request, format=None):  # type: ignore
        report = self.get_report(request)
        result = report.generate()
        export = request.accepted_renderer.format == CSVRenderer.format
        logger.info("report.generated", report=report.name, user_id=request.user.id, csv=export)

        if export:
            filename = f"{report.name}_report_{report.today.isoformat()}.csv"
            return Response(
                report.rows(result),
                headers={"Content-Disposition": f'attachment; filename="{filename}"'},
            )
        return Response(result)


class FinancialReportView(ReportView):
    def get_report(self, request):  # type: ignore
        today = timezone.localdate()
        params = request.query_params
        period = None
        if params.get("start_date") or params.get("end_date"):
            period = period_from_params(params, month_start, today)
        return services.FinancialReport(period, today=today)


class OccupancyReportView(ReportView):
    def get_report(self, request):  # type: ignore
        return services.OccupancyReport()


class AvailabilityReportView(ReportView):
    def get_report(self, request):  # type: ignore
        return services.AvailabilityReport()


class CarReportView(ReportView):
    def get_report(self, request):  # type: ignore
        today = timezone.localdate()
        period = period_from_params(request.query_params, services.year_before, today)
        return services.CarReport(period, today=today)
