"""Tests for BookingLedger: creation, transitions and occupancy bookkeeping."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from apps.housing.domain.exceptions import (
    BookingNotFound,
    DuplicateActiveBooking,
    InvalidTransition,
    RoomFull,
    RoomNotFound,
    Unauthorized,
)
from apps.housing.domain.transitions import Actor
from apps.housing.models import Booking, Room
from apps.housing.services import BookingLedger
from apps.notifications.models import Notification

SEMESTER = "Fall 2025"

pytestmark = pytest.mark.django_db


@pytest.fixture
def ledger():
    return BookingLedger()


def occupancy(room) -> int:
    return Room.objects.get(pk=room.pk).current_occupancy


def assert_counter_matches_ledger(ledger, room):
    assert occupancy(room) == ledger.recount_occupancy(room.pk)


def test_create_booking_takes_a_place(ledger, student, room):
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)

    assert booking.status == Booking.Status.PENDING
    assert booking.student_id == student.pk
    assert booking.semester == SEMESTER
    assert occupancy(room) == 1
    assert_counter_matches_ledger(ledger, room)


def test_create_booking_in_unknown_room(ledger, student):
    with pytest.raises(RoomNotFound):
        ledger.create_booking(student.pk, 999_999, SEMESTER)
    assert Booking.objects.count() == 0


def test_full_room_rejects_booking(ledger, make_user, room):
    for _ in range(room.capacity):
        ledger.create_booking(make_user().pk, room.pk, SEMESTER)
    latecomer = make_user()

    with pytest.raises(RoomFull):
        ledger.create_booking(latecomer.pk, room.pk, SEMESTER)

    assert occupancy(room) == 2
    assert not Booking.objects.filter(student=latecomer).exists()
    assert_counter_matches_ledger(ledger, room)


def test_second_active_booking_for_semester_is_rejected(ledger, student, make_room):
    first_room, second_room = make_room(), make_room()
    ledger.create_booking(student.pk, first_room.pk, SEMESTER)

    with pytest.raises(DuplicateActiveBooking):
        ledger.create_booking(student.pk, second_room.pk, SEMESTER)

    assert occupancy(second_room) == 0
    assert Booking.objects.filter(student=student).count() == 1


def test_other_semester_is_independent(ledger, student, room):
    ledger.create_booking(student.pk, room.pk, SEMESTER)
    ledger.create_booking(student.pk, room.pk, "Spring 2026")

    assert occupancy(room) == 2


def test_student_can_rebook_after_cancelling(ledger, student, room):
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)
    ledger.transition_booking(booking.pk, "CANCELLED", Actor.from_user(student))

    rebooked = ledger.create_booking(student.pk, room.pk, SEMESTER)

    assert rebooked.pk != booking.pk
    assert occupancy(room) == 1


def test_unique_constraint_catches_duplicate_that_slips_past_precheck(
    ledger, student, make_room, monkeypatch
):
    first_room, second_room = make_room(), make_room()
    ledger.create_booking(student.pk, first_room.pk, SEMESTER)
    monkeypatch.setattr(ledger, "_has_active_booking", lambda *args, **kwargs: False)

    with pytest.raises(DuplicateActiveBooking):
        ledger.create_booking(student.pk, second_room.pk, SEMESTER)

    # The increment is rolled back together with the failed insert.
    assert occupancy(second_room) == 0
    assert Booking.objects.filter(student=student).count() == 1


def test_confirm_then_reject_releases_the_place(ledger, student, admin_user, room):
    admin = Actor.from_user(admin_user)
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)
    assert occupancy(room) == 1

    confirmed = ledger.transition_booking(booking.pk, "CONFIRMED", admin)
    assert confirmed.status == Booking.Status.CONFIRMED
    assert occupancy(room) == 1

    rejected = ledger.transition_booking(booking.pk, "REJECTED", admin)
    assert rejected.status == Booking.Status.REJECTED
    assert occupancy(room) == 0
    assert_counter_matches_ledger(ledger, room)


def test_repeated_cancel_does_not_release_twice(ledger, student, make_user, room):
    other = make_user()
    ledger.create_booking(other.pk, room.pk, SEMESTER)
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)
    actor = Actor.from_user(student)

    ledger.transition_booking(booking.pk, "CANCELLED", actor)
    assert occupancy(room) == 1

    with pytest.raises(InvalidTransition):
        ledger.transition_booking(booking.pk, "CANCELLED", actor)

    assert occupancy(room) == 1
    assert_counter_matches_ledger(ledger, room)


def test_cancel_on_stale_read_loses_the_status_swap(ledger, student, room, monkeypatch):
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)
    stale = Booking.objects.get(pk=booking.pk)
    actor = Actor.from_user(student)
    ledger.transition_booking(booking.pk, "CANCELLED", actor)
    assert occupancy(room) == 0

    # Row locks ignored: the second request still sees the booking as PENDING.
    monkeypatch.setattr(
        "apps.housing.services._lock_queryset_if_possible",
        lambda queryset: SimpleNamespace(first=lambda: stale),
    )

    with pytest.raises(InvalidTransition):
        ledger.transition_booking(booking.pk, "CANCELLED", actor)

    assert occupancy(room) == 0
    assert_counter_matches_ledger(ledger, room)


def test_student_cannot_confirm_own_booking(ledger, student, room):
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)

    with pytest.raises(Unauthorized):
        ledger.transition_booking(booking.pk, "CONFIRMED", Actor.from_user(student))

    booking.refresh_from_db()
    assert booking.status == Booking.Status.PENDING


def test_student_cannot_cancel_someone_elses_booking(ledger, student, other_student, room):
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)

    with pytest.raises(Unauthorized):
        ledger.transition_booking(booking.pk, "CANCELLED", Actor.from_user(other_student))

    assert occupancy(room) == 1


def test_faculty_cannot_change_bookings(ledger, student, make_user, room):
    faculty = make_user("FACULTY")
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)

    with pytest.raises(Unauthorized):
        ledger.transition_booking(booking.pk, "REJECTED", Actor.from_user(faculty))


def test_transition_unknown_booking(ledger, admin_user):
    with pytest.raises(BookingNotFound):
        ledger.transition_booking(424242, "CONFIRMED", Actor.from_user(admin_user))


def test_admin_reopen_takes_the_place_back(ledger, student, admin_user, room):
    admin = Actor.from_user(admin_user)
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)
    ledger.transition_booking(booking.pk, "REJECTED", admin)
    assert occupancy(room) == 0

    ledger.transition_booking(booking.pk, "PENDING", admin)

    assert occupancy(room) == 1
    assert_counter_matches_ledger(ledger, room)


def test_admin_reopen_into_full_room_fails(ledger, student, make_user, admin_user, make_room):
    admin = Actor.from_user(admin_user)
    room = make_room(capacity=1)
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)
    ledger.transition_booking(booking.pk, "CANCELLED", admin)
    ledger.create_booking(make_user().pk, room.pk, SEMESTER)

    with pytest.raises(RoomFull):
        ledger.transition_booking(booking.pk, "CONFIRMED", admin)

    booking.refresh_from_db()
    assert booking.status == Booking.Status.CANCELLED
    assert occupancy(room) == 1


def test_admin_reopen_blocked_by_newer_active_booking(ledger, student, admin_user, make_room):
    admin = Actor.from_user(admin_user)
    first_room, second_room = make_room(), make_room()
    old = ledger.create_booking(student.pk, first_room.pk, SEMESTER)
    ledger.transition_booking(old.pk, "REJECTED", admin)
    ledger.create_booking(student.pk, second_room.pk, SEMESTER)

    with pytest.raises(DuplicateActiveBooking):
        ledger.transition_booking(old.pk, "PENDING", admin)

    assert occupancy(first_room) == 0
    assert occupancy(second_room) == 1


def test_bookings_for_scopes_by_role(ledger, student, other_student, admin_user, make_user, room):
    mine = ledger.create_booking(student.pk, room.pk, SEMESTER)
    ledger.create_booking(other_student.pk, room.pk, SEMESTER)

    assert list(ledger.bookings_for(Actor.from_user(student))) == [mine]
    assert ledger.bookings_for(Actor.from_user(admin_user)).count() == 2
    assert ledger.bookings_for(Actor.from_user(make_user("LANDLORD"))).count() == 0


def test_events_notify_student_after_commit(
    ledger, student, admin_user, room, django_capture_on_commit_callbacks
):
    with django_capture_on_commit_callbacks(execute=True):
        booking = ledger.create_booking(student.pk, room.pk, SEMESTER)

    created = Notification.objects.get(user=student)
    assert created.title == "Room Booking Submitted"
    assert created.message == (
        f"Your booking request for Room {room.room_number} ({SEMESTER}) is pending approval."
    )
    assert created.type == Notification.Type.INFO
    assert created.link == "/housing"

    with django_capture_on_commit_callbacks(execute=True):
        ledger.transition_booking(booking.pk, "CONFIRMED", Actor.from_user(admin_user))

    update = Notification.objects.filter(user=student).exclude(pk=created.pk).get()
    assert update.title == "Booking Status Update"
    assert update.message == "Your room booking has been confirmed!"
    assert update.type == Notification.Type.SUCCESS


def test_failed_transition_sends_no_notification(
    ledger, student, room, django_capture_on_commit_callbacks
):
    booking = ledger.create_booking(student.pk, room.pk, SEMESTER)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(Unauthorized):
            ledger.transition_booking(booking.pk, "CONFIRMED", Actor.from_user(student))

    assert callbacks == []
    assert not Notification.objects.filter(user=student).exists()


def test_room_availability(ledger, student, make_room):
    room = make_room(capacity=1)
    assert ledger.rooms.availability(room) == {"is_available": True, "spots_left": 1}

    ledger.create_booking(student.pk, room.pk, SEMESTER)

    room.refresh_from_db()
    assert ledger.rooms.availability(room) == {"is_available": False, "spots_left": 0}
