"""URL configuration for AutoRent.

Everything the frontend talks to lives under ``/api/``; each app ships
its own ``urls.py`` and is mounted here.
"""
from django.conf import settings  # type: ignore
from django.conf.urls.static import static  # type: ignore
from django.contrib import admin  # type: ignore
from django.urls import include, path  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

from .views import healthz

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', healthz, name='health'),
    # API schema and docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    # Application URLs
    path('api/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/users/', include('apps.users.urls')),
    path('api/cars/', include('apps.cars.urls')),
    path('api/clients/', include('apps.clients.urls')),
    path('api/rentals/', include('apps.rentals.urls')),
    path('api/penalties/', include('apps.rentals.penalty_urls')),
    path('api/analytics/', include('apps.analytics.urls')),
    path('api/reports/', include('apps.reports.urls')),
    path('api/search/', include('apps.search.urls')),
    path('api/upload/', include('apps.uploads.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

handler404 = 'shared.infrastructure.exceptions.api_not_found'
