"""API views for the housing domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus

from .application.command_handlers import CreateBookingCommand, TransitionBookingCommand
from .domain.transitions import Actor
from .filters import BookingFilterSet, RoomFilterSet
from .models import Booking, Room
from .permissions import CanBookRooms
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    RoomSerializer,
)
from .services import BookingLedger


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """Rooms with their remaining places."""

    queryset = Room.objects.select_related("block").all()
    serializer_class = RoomSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = RoomFilterSet


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Create, list and re-status room bookings.

    ``POST`` books a place (students only); ``PATCH`` with ``{"status"}``
    cancels (students, own bookings) or confirms/rejects/reopens (admins).
    """

    permission_classes = [CanBookRooms]
    filterset_class = BookingFilterSet
    http_method_names = ["get", "post", "patch", "head", "options"]
    lookup_value_regex = r"\d+"

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action in ("update", "partial_update"):
            return BookingStatusSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        if not user.is_authenticated:
            return Booking.objects.none()
        return BookingLedger().bookings_for(Actor.from_user(user))

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            CreateBookingCommand(
                student_id=request.user.pk,
                room_id=serializer.validated_data["room"],
                semester=serializer.validated_data["semester"],
            )
        )
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def update(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        # Not self.get_object(): the ledger distinguishes a missing booking
        # (404) from someone else's booking (403).
        booking = message_bus.handle_command(
            TransitionBookingCommand(
                booking_id=int(kwargs[self.lookup_field]),
                status=serializer.validated_data["status"],
                actor=Actor.from_user(request.user),
            )
        )
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)
