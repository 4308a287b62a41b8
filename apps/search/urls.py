"""URL routing for search endpoints."""

from django.urls import path  # type: ignore

from .views import CarSearchView, ClientSearchView, RentalSearchView


urlpatterns = [
    path('cars/', CarSearchView.as_view(), name='search-cars'),
    path('clients/', ClientSearchView.as_view(), name='search-clients'),
    path('rentals/', RentalSearchView.as_view(), name='search-rentals'),
]
