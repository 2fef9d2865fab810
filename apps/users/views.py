"""Views for user profile access."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore
from rest_framework.generics import RetrieveAPIView  # type: ignore

from .serializers import UserSerializer


class MeView(RetrieveAPIView):
    """Return the profile (and role) of the authenticated user."""

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):  # type: ignore
        return self.request.user
