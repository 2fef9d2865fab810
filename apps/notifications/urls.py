"""URL routing for notifications."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import NotificationViewSet

# Registered at the app root, so no API root view to shadow the list route.
router = SimpleRouter()
router.register(r'', NotificationViewSet, basename='notification')

urlpatterns = [path('', include(router.urls))]
