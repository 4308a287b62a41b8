"""URL declarations for penalties (mounted at /api/penalties/)."""

from __future__ import annotations

from django.urls import path, include  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import PenaltyViewSet

router = DefaultRouter()
router.register(r'', PenaltyViewSet, basename='penalty')

urlpatterns = [
    path('', include(router.urls)),
]
