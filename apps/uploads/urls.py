"""URL routing for image uploads."""

from django.urls import path  # type: ignore

from .views import ImageDeleteView, ImagesUploadView, ImageUploadView


urlpatterns = [
    path('image/', ImageUploadView.as_view(), name='upload-image'),
    path('images/', ImagesUploadView.as_view(), name='upload-images'),
    path('image/<str:filename>/', ImageDeleteView.as_view(), name='upload-image-delete'),
]
