"""Domain services for the room booking ledger.

Three collaborators share the work:

- :class:`OccupancyReconciler` is the only code allowed to write
  ``Room.current_occupancy``. It applies +1/-1 as a single conditional
  ``UPDATE`` so the bounds check and the write cannot interleave with
  another request.
- :class:`RoomRegistry` reads rooms and exposes increment/decrement in
  terms of the reconciler.
- :class:`BookingLedger` creates bookings and moves them between
  statuses, pairing every status change with the matching occupancy
  change inside one transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import Count, F, Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork

from .domain.events import BookingCreated, BookingStatusChanged
from .domain.exceptions import (
    BookingNotFound,
    CapacityExceeded,
    DuplicateActiveBooking,
    InvalidTransition,
    InvariantViolation,
    RoomFull,
    RoomNotFound,
)
from .domain.transitions import (
    ACTIVE_STATUSES,
    Actor,
    BookingStatus,
    authorize_transition,
    occupancy_delta,
)
from .models import Booking, Room

logger = logging.getLogger(__name__)
invariant_logger = logging.getLogger("apps.housing.invariants")


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


@dataclass(frozen=True)
class OccupancyDrift:
    """A room whose cached counter disagrees with its active bookings."""

    room_id: int
    cached: int
    actual: int


class OccupancyReconciler:
    """Single writer of ``Room.current_occupancy``."""

    def apply_delta(self, room_id: int, delta: int) -> int:
        """
        Atomically add ``delta`` (+1 or -1) to the room's occupancy.

        Equivalent to ``UPDATE room SET current_occupancy = current_occupancy + delta
        WHERE id = ? AND <result stays within [0, capacity]>``; the affected
        row count tells whether the guard held.

        Returns:
            The occupancy after the update.

        Raises:
            RoomNotFound: no such room
            CapacityExceeded: +1 on a room already at capacity
            InvariantViolation: -1 on a room with zero occupancy
        """
        if delta not in (1, -1):
            raise ValueError(f"Occupancy delta must be +1 or -1, got {delta!r}")

        guard = Q(current_occupancy__lt=F("capacity")) if delta > 0 else Q(current_occupancy__gt=0)
        updated = (
            Room.objects.filter(pk=room_id)
            .filter(guard)
            .update(current_occupancy=F("current_occupancy") + delta)
        )

        if updated:
            occupancy = Room.objects.values_list("current_occupancy", flat=True).get(pk=room_id)
            logger.debug(f"Room {room_id} occupancy {delta:+d} -> {occupancy}")
            return occupancy

        try:
            room = Room.objects.get(pk=room_id)
        except Room.DoesNotExist:
            raise RoomNotFound(room_id)

        if delta > 0:
            raise CapacityExceeded(room_id)

        message = (
            f"Room {room_id} occupancy would drop below zero "
            f"(occupancy={room.current_occupancy}, capacity={room.capacity})"
        )
        invariant_logger.critical(message)
        raise InvariantViolation(room_id, message)

    def recount(self, room_id: int) -> int:
        """Active bookings for the room, computed from the ledger."""
        return Booking.objects.active().filter(room_id=room_id).count()

    def audit(self) -> list[OccupancyDrift]:
        """
        Compare every room's cached counter with its active bookings.

        Drift is reported and logged, never repaired here: a mismatch
        means some write bypassed the reconciler and needs a human.
        """
        active = [status.value for status in ACTIVE_STATUSES]
        rooms = Room.objects.annotate(
            active_bookings=Count("bookings", filter=Q(bookings__status__in=active))
        ).values_list("pk", "current_occupancy", "active_bookings")

        drifted = []
        for room_id, cached, actual in rooms:
            if cached != actual:
                drifted.append(OccupancyDrift(room_id=room_id, cached=cached, actual=actual))
                invariant_logger.critical(
                    f"Room {room_id} occupancy drift: counter={cached}, active bookings={actual}"
                )
        return drifted


class RoomRegistry:
    """Read access to rooms plus occupancy adjustment through the reconciler."""

    def __init__(self, reconciler: OccupancyReconciler | None = None):
        self.reconciler = reconciler or OccupancyReconciler()

    def get_room(self, room_id: int) -> Room:
        try:
            return Room.objects.select_related("block").get(pk=room_id)
        except Room.DoesNotExist:
            raise RoomNotFound(room_id)

    def increment_occupancy(self, room_id: int) -> int:
        return self.reconciler.apply_delta(room_id, 1)

    def decrement_occupancy(self, room_id: int) -> int:
        return self.reconciler.apply_delta(room_id, -1)

    @staticmethod
    def availability(room: Room) -> dict[str, int | bool]:
        return {"is_available": room.is_available, "spots_left": room.spots_left}


class BookingLedger:
    """Creates and transitions room bookings."""

    def __init__(self, rooms: RoomRegistry | None = None):
        self.rooms = rooms or RoomRegistry()

    @property
    def reconciler(self) -> OccupancyReconciler:
        return self.rooms.reconciler

    def create_booking(self, student_id: int, room_id: int, semester: str) -> Booking:
        """
        Create a PENDING booking and take a place in the room.

        The capacity and duplicate checks run twice: once as cheap
        pre-checks for a clear early answer, and again authoritatively
        inside the transaction (conditional UPDATE for capacity, partial
        unique constraint for duplicates).

        Raises:
            RoomNotFound, RoomFull, DuplicateActiveBooking
        """
        room = self.rooms.get_room(room_id)

        if not room.is_available:
            raise RoomFull(room.pk)

        if self._has_active_booking(student_id, semester):
            raise DuplicateActiveBooking(student_id, semester)

        with DjangoUnitOfWork() as uow:
            self.rooms.increment_occupancy(room.pk)
            try:
                with transaction.atomic():
                    booking = Booking.objects.create(
                        student_id=student_id,
                        room_id=room.pk,
                        semester=semester,
                        status=Booking.Status.PENDING,
                    )
            except IntegrityError:
                raise DuplicateActiveBooking(student_id, semester)

            uow.add_event(BookingCreated(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                student_id=student_id,
                room_id=room.pk,
                room_number=room.room_number,
                semester=semester,
            ))

        logger.info(
            f"Booking {booking.pk} created: student {student_id}, "
            f"room {room.room_number}, {semester}"
        )
        return booking

    def transition_booking(self, booking_id: int, new_status: str, actor: Actor) -> Booking:
        """
        Move a booking to ``new_status`` on behalf of ``actor``.

        The booking row is locked for the duration and the status is
        written first, with a compare-and-swap on the old status; the
        implied occupancy change follows in the same transaction.

        Raises:
            BookingNotFound, Unauthorized, InvalidTransition,
            RoomFull, DuplicateActiveBooking (reopening a terminal booking)
        """
        requested = BookingStatus(new_status)

        with DjangoUnitOfWork() as uow:
            queryset = _lock_queryset_if_possible(Booking.objects.filter(pk=booking_id))
            booking = queryset.first()
            if booking is None:
                raise BookingNotFound(booking_id)

            current = BookingStatus(booking.status)
            authorize_transition(current, requested, actor, owner_id=booking.student_id)

            delta = occupancy_delta(current, requested)
            if delta > 0 and self._has_active_booking(
                booking.student_id, booking.semester, exclude_id=booking.pk
            ):
                raise DuplicateActiveBooking(booking.student_id, booking.semester)

            # Status first: a request that lost the race must not touch the counter.
            try:
                with transaction.atomic():
                    swapped = Booking.objects.filter(pk=booking.pk, status=current.value).update(
                        status=requested.value,
                        updated_at=timezone.now(),
                    )
            except IntegrityError:
                raise DuplicateActiveBooking(booking.student_id, booking.semester)

            if not swapped:
                # Another request changed the status after we read it.
                booking.refresh_from_db(fields=["status"])
                raise InvalidTransition(booking.status, requested.value)

            if delta:
                self.reconciler.apply_delta(booking.room_id, delta)

            booking.refresh_from_db()

            uow.add_event(BookingStatusChanged(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                student_id=booking.student_id,
                room_id=booking.room_id,
                old_status=current.value,
                new_status=requested.value,
                changed_by=actor.user_id,
            ))

        logger.info(
            f"Booking {booking.pk} {current.value} -> {requested.value} "
            f"by {actor.role.value.lower()} {actor.user_id}"
        )
        return booking

    def recount_occupancy(self, room_id: int) -> int:
        return self.reconciler.recount(room_id)

    def bookings_for(self, actor: Actor):
        """Bookings visible to ``actor``: all for admins, own for students."""
        queryset = Booking.objects.select_related("room", "room__block")
        if actor.is_admin:
            return queryset
        if actor.is_student:
            return queryset.filter(student_id=actor.user_id)
        return queryset.none()

    def _has_active_booking(self, student_id: int, semester: str, exclude_id: int | None = None) -> bool:
        queryset = Booking.objects.active().for_student_semester(student_id, semester)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset.exists()
