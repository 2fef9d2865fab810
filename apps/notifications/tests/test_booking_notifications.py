"""Tests for the housing event handlers, the notify sink and the activity log."""

from __future__ import annotations

from unittest import mock

import pytest
from django.db import DatabaseError

from apps.housing.domain.events import BookingCreated, BookingStatusChanged
from apps.housing.domain.transitions import Actor
from apps.housing.services import BookingLedger
from apps.notifications.handlers import (
    notify_booking_created,
    notify_booking_status_changed,
    record_booking_created,
    record_booking_status_changed,
)
from apps.notifications.models import ActivityLog, Notification
from apps.notifications.services import log_activity, mark_all_read, notify, unread_count

pytestmark = pytest.mark.django_db


def status_changed(student, new_status, old_status="PENDING"):
    return BookingStatusChanged(
        aggregate_id=1,
        booking_id=1,
        student_id=student.pk,
        room_id=1,
        old_status=old_status,
        new_status=new_status,
        changed_by=student.pk,
    )


def test_booking_created_message(student):
    notify_booking_created(BookingCreated(
        aggregate_id=1,
        booking_id=1,
        student_id=student.pk,
        room_id=1,
        room_number="204",
        semester="Spring 2026",
    ))

    notification = Notification.objects.get(user=student)
    assert notification.message == "Your booking request for Room 204 (Spring 2026) is pending approval."
    assert notification.type == Notification.Type.INFO


@pytest.mark.parametrize(
    "new_status, severity, fragment",
    [
        ("CONFIRMED", Notification.Type.SUCCESS, "confirmed"),
        ("REJECTED", Notification.Type.ERROR, "contact administration"),
        ("CANCELLED", Notification.Type.WARNING, "cancelled"),
    ],
)
def test_status_change_messages(student, new_status, severity, fragment):
    notify_booking_status_changed(status_changed(student, new_status))

    notification = Notification.objects.get(user=student)
    assert notification.title == "Booking Status Update"
    assert notification.type == severity
    assert fragment in notification.message
    assert notification.link == "/housing"


def test_reopen_to_pending_is_silent(student):
    notify_booking_status_changed(status_changed(student, "PENDING", old_status="REJECTED"))

    assert not Notification.objects.filter(user=student).exists()


def test_notify_failure_is_swallowed(student):
    with mock.patch.object(Notification.objects, "create", side_effect=DatabaseError("down")):
        assert notify(student.pk, "Title", "Body") is None


def test_unread_count_and_mark_all_read(student, other_student):
    notify(student.pk, "One", "1")
    notify(student.pk, "Two", "2")
    notify(other_student.pk, "Three", "3")

    assert unread_count(student.pk) == 2
    assert mark_all_read(student.pk) == 2
    assert unread_count(student.pk) == 0
    assert unread_count(other_student.pk) == 1


def test_booking_created_is_recorded_as_activity(student):
    record_booking_created(BookingCreated(
        aggregate_id=7,
        booking_id=7,
        student_id=student.pk,
        room_id=1,
        room_number="204",
        semester="Spring 2026",
    ))

    entry = ActivityLog.objects.get(user=student)
    assert entry.action_type == ActivityLog.ActionType.BOOKING_SUBMITTED
    assert entry.reference_id == "7"
    assert entry.reference_type == "room_booking"
    assert entry.metadata == {"room_number": "204", "semester": "Spring 2026"}


def test_status_change_is_recorded_for_the_actor(student, admin_user):
    event = status_changed(student, "CONFIRMED")
    event.changed_by = admin_user.pk

    record_booking_status_changed(event)

    entry = ActivityLog.objects.get()
    assert entry.user == admin_user
    assert entry.action_type == ActivityLog.ActionType.BOOKING_STATUS_CHANGED
    assert entry.metadata == {
        "student_id": student.pk,
        "old_status": "PENDING",
        "new_status": "CONFIRMED",
    }


def test_log_activity_failure_is_swallowed(student):
    with mock.patch.object(ActivityLog.objects, "create", side_effect=DatabaseError("down")):
        assert log_activity(student.pk, ActivityLog.ActionType.BOOKING_SUBMITTED) is None


def test_ledger_records_activity_after_commit(
    student, room, django_capture_on_commit_callbacks
):
    ledger = BookingLedger()

    with django_capture_on_commit_callbacks(execute=True):
        booking = ledger.create_booking(student.pk, room.pk, "Fall 2025")
    with django_capture_on_commit_callbacks(execute=True):
        ledger.transition_booking(booking.pk, "CANCELLED", Actor.from_user(student))

    actions = sorted(ActivityLog.objects.filter(user=student).values_list("action_type", flat=True))
    assert actions == ["BOOKING_STATUS_CHANGED", "BOOKING_SUBMITTED"]
    assert set(ActivityLog.objects.values_list("reference_id", flat=True)) == {str(booking.pk)}
