"""Housing domain models.

Rooms carry a denormalised ``current_occupancy`` counter that must equal
the number of active (PENDING or CONFIRMED) bookings against the room.
The counter is only ever written by
:class:`apps.housing.services.OccupancyReconciler`; database check
constraints keep it within ``[0, capacity]`` even for writes that bypass it.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain.transitions import ACTIVE_STATUSES, BookingStatus


class HostelBlock(models.Model):
    """A hostel building or wing grouping rooms."""

    class GenderRestriction(models.TextChoices):
        MALE = "MALE", _("Male")
        FEMALE = "FEMALE", _("Female")
        MIXED = "MIXED", _("Mixed")

    name = models.CharField(max_length=120)
    location = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("e.g. North Wing, Campus A"),
    )
    gender_restriction = models.CharField(
        max_length=10,
        choices=GenderRestriction.choices,
        default=GenderRestriction.MIXED,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Hostel block")
        verbose_name_plural = _("Hostel blocks")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Room(models.Model):
    """A bookable hostel room with a fixed number of places."""

    block = models.ForeignKey(HostelBlock, on_delete=models.CASCADE, related_name="rooms")
    room_number = models.CharField(max_length=20)
    capacity = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    current_occupancy = models.PositiveSmallIntegerField(
        default=0,
        editable=False,
        help_text=_("Active bookings against the room. Maintained by the occupancy reconciler."),
    )
    price_per_semester = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["block__name", "room_number"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gt=0),
                name="room_capacity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(current_occupancy__gte=0)
                & models.Q(current_occupancy__lte=models.F("capacity")),
                name="room_occupancy_within_capacity",
            ),
            models.UniqueConstraint(fields=["block", "room_number"], name="unique_room_number_per_block"),
        ]

    def __str__(self) -> str:
        return f"Room {self.room_number} ({self.block})"

    @property
    def spots_left(self) -> int:
        return max(self.capacity - self.current_occupancy, 0)

    @property
    def is_available(self) -> bool:
        return self.current_occupancy < self.capacity


class BookingQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status__in=[status.value for status in ACTIVE_STATUSES])

    def for_student_semester(self, student_id, semester: str):
        return self.filter(student_id=student_id, semester=semester)


class Booking(models.Model):
    """A student's request for a place in a room for one semester."""

    class Status(models.TextChoices):
        PENDING = BookingStatus.PENDING.value, _("Pending")
        CONFIRMED = BookingStatus.CONFIRMED.value, _("Confirmed")
        REJECTED = BookingStatus.REJECTED.value, _("Rejected")
        CANCELLED = BookingStatus.CANCELLED.value, _("Cancelled")

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="room_bookings",
    )
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="bookings")
    semester = models.CharField(max_length=32, help_text=_('e.g. "Fall 2025"'))
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Room booking")
        verbose_name_plural = _("Room bookings")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "semester"],
                condition=models.Q(status__in=["PENDING", "CONFIRMED"]),
                name="one_active_booking_per_semester",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "status"], name="booking_room_status_idx"),
            models.Index(fields=["student", "semester"], name="booking_student_semester_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} {self.semester} room {self.room_id} ({self.status})"

    @property
    def is_active(self) -> bool:
        return BookingStatus(self.status) in ACTIVE_STATUSES
