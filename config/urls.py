"""URL configuration for the campus housing project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the API schema and the per-app routers provided by Django Rest Framework.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

urlpatterns = [
    path('admin/', admin.site.urls),
    # API schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    # Application URLs
    path('api/v1/users/', include('apps.users.urls')),
    path('api/v1/housing/', include('apps.housing.urls')),
    path('api/v1/notifications/', include('apps.notifications.urls')),
]
