"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import (
    DashboardView,
    OccupancyRateView,
    PopularCarsView,
    RevenueForecastView,
    RevenueView,
    TopClientsView,
)


urlpatterns = [
    # Do not prefix with 'analytics/' here; the prefix is defined in config.urls
    path('dashboard/', DashboardView.as_view(), name='analytics-dashboard'),
    path('revenue/', RevenueView.as_view(), name='analytics-revenue'),
    path('popular-cars/', PopularCarsView.as_view(), name='analytics-popular-cars'),
    path('top-clients/', TopClientsView.as_view(), name='analytics-top-clients'),
    path('occupancy-rate/', OccupancyRateView.as_view(), name='analytics-occupancy-rate'),
    path('revenue-forecast/', RevenueForecastView.as_view(), name='analytics-revenue-forecast'),
]
