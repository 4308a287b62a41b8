"""URL routing for report endpoints."""

from django.urls import path  # type: ignore

from .views import AvailabilityReportView, CarReportView, FinancialReportView, OccupancyReportView


urlpatterns = [
    path('financial/', FinancialReportView.as_view(), name='report-financial'),
    path('occupancy/', OccupancyReportView.as_view(), name='report-occupancy'),
    path('availability/', AvailabilityReportView.as_view(), name='report-availability'),
    path('cars/', CarReportView.as_view(), name='report-cars'),
]
