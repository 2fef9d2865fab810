"""Event handlers that turn housing events into notifications and activity entries."""

from __future__ import annotations

from apps.housing.domain.events import BookingCreated, BookingStatusChanged

from .models import ActivityLog, Notification
from .services import log_activity, notify

HOUSING_LINK = "/housing"
BOOKING_REFERENCE = "room_booking"

STATUS_MESSAGES = {
    "CONFIRMED": (
        "Your room booking has been confirmed!",
        Notification.Type.SUCCESS,
    ),
    "REJECTED": (
        "Your room booking has been rejected. Please contact administration for more details.",
        Notification.Type.ERROR,
    ),
    "CANCELLED": (
        "Your room booking has been cancelled.",
        Notification.Type.WARNING,
    ),
}


def notify_booking_created(event: BookingCreated) -> None:
    notify(
        event.student_id,
        "Room Booking Submitted",
        f"Your booking request for Room {event.room_number} ({event.semester}) is pending approval.",
        Notification.Type.INFO,
        HOUSING_LINK,
    )


def notify_booking_status_changed(event: BookingStatusChanged) -> None:
    # Moving a booking back to PENDING is an internal correction; no message.
    if event.new_status not in STATUS_MESSAGES:
        return
    message, severity = STATUS_MESSAGES[event.new_status]
    notify(event.student_id, "Booking Status Update", message, severity, HOUSING_LINK)


def record_booking_created(event: BookingCreated) -> None:
    log_activity(
        event.student_id,
        ActivityLog.ActionType.BOOKING_SUBMITTED,
        event.booking_id,
        BOOKING_REFERENCE,
        {"room_number": event.room_number, "semester": event.semester},
    )


def record_booking_status_changed(event: BookingStatusChanged) -> None:
    # Attributed to whoever made the change, student or admin.
    log_activity(
        event.changed_by,
        ActivityLog.ActionType.BOOKING_STATUS_CHANGED,
        event.booking_id,
        BOOKING_REFERENCE,
        {
            "student_id": event.student_id,
            "old_status": event.old_status,
            "new_status": event.new_status,
        },
    )


def register_handlers(bus) -> None:
    bus.register_event_handler(BookingCreated, notify_booking_created)
    bus.register_event_handler(BookingCreated, record_booking_created)
    bus.register_event_handler(BookingStatusChanged, notify_booking_status_changed)
    bus.register_event_handler(BookingStatusChanged, record_booking_status_changed)
