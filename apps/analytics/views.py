"""API views for analytics.

Dashboard figures for administrators and managers. Periods are read
from ``start_date``/``end_date`` query parameters and default to the
current month.
"""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsAdminOrManager
from shared.infrastructure.params import period_from_params, positive_int_param

from . import services


class AnalyticsView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrManager]

    def get_period(self, request):  # type: ignore
        return period_from_params(request.query_params, services.month_start, timezone.localdate())


class DashboardView(AnalyticsView):
    def get(self, request, format=None):  # type: ignore
        return Response(services.dashboard(self.get_period(request)))


class RevenueView(AnalyticsView):
    def get(self, request, format=None):  # type: ignore
        return Response(services.revenue_stats(self.get_period(request)))


class PopularCarsView(AnalyticsView):
    def get(self, request, format=None):  # type: ignore
        limit = positive_int_param(request.query_params, "limit", default=10)
        return Response(services.popular_cars(limit))


class TopClientsView(AnalyticsView):
    def get(self, request, format=None):  # type: ignore
        limit = positive_int_param(request.query_params, "limit", default=10)
        return Response(services.top_clients(limit))


class OccupancyRateView(AnalyticsView):
    def get(self, request, format=None):  # type: ignore
        return Response({"occupancy_rate": services.occupancy_rate()})


class RevenueForecastView(AnalyticsView):
    def get(self, request, format=None):  # type: ignore
        return Response(services.revenue_forecast())
