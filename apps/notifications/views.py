"""API views for notifications."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Notification
from .serializers import NotificationSerializer
from .services import mark_all_read, unread_count

DEFAULT_LIMIT = 20


class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """List, mark read and delete notifications of the authenticated user."""

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):  # type: ignore
        return Notification.objects.filter(user=self.request.user)

    def list(self, request, *args, **kwargs):  # type: ignore
        queryset = self.get_queryset()
        if request.query_params.get('unread') == 'true':
            queryset = queryset.filter(is_read=False)
        try:
            limit = int(request.query_params.get('limit', DEFAULT_LIMIT))
        except (TypeError, ValueError):
            limit = DEFAULT_LIMIT
        serializer = self.get_serializer(queryset[:max(limit, 0)], many=True)
        return Response({
            'notifications': serializer.data,
            'unread_count': unread_count(request.user.pk),
        })

    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):  # type: ignore
        notification = self.get_object()
        notification.is_read = True
        notification.save(update_fields=['is_read'])
        return Response({'status': 'read'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def mark_all_read(self, request):  # type: ignore
        updated = mark_all_read(request.user.pk)
        return Response({'updated': updated}, status=status.HTTP_200_OK)
