"""Concurrent booking requests against the last free place.

The stale-read tests let the pre-check see an outdated room, so only
the conditional update stands between the request and an overbooked
room. The threaded tests need a database the worker threads can share:
PostgreSQL, or the file-based SQLite test database.
"""

from __future__ import annotations

import threading
from decimal import Decimal
from functools import partial

from django.db import connection
from django.test import TestCase, TransactionTestCase

from apps.housing.domain.exceptions import CapacityExceeded, DuplicateActiveBooking, RoomFull
from apps.housing.models import Booking, HostelBlock, Room
from apps.housing.services import BookingLedger
from apps.users.models import User

SEMESTER = "Fall 2025"


def _room(capacity: int = 1) -> Room:
    block = HostelBlock.objects.create(name="East Hall")
    return Room.objects.create(
        block=block, room_number="1", capacity=capacity, price_per_semester=Decimal("25000.00")
    )


def _students(count: int) -> list[User]:
    return [
        User.objects.create_user(email=f"racer{i}@campus.example.com", password="pw-123456")
        for i in range(count)
    ]


class StaleReadTests(TestCase):
    def test_stale_precheck_cannot_overbook(self) -> None:
        room = _room(capacity=1)
        first, second = _students(2)
        ledger = BookingLedger()
        stale = Room.objects.select_related("block").get(pk=room.pk)

        ledger.create_booking(first.pk, room.pk, SEMESTER)
        # The second request read the room before the first one committed.
        ledger.rooms.get_room = lambda room_id: stale

        with self.assertRaises(CapacityExceeded):
            ledger.create_booking(second.pk, room.pk, SEMESTER)

        room.refresh_from_db()
        self.assertEqual(room.current_occupancy, 1)
        self.assertFalse(Booking.objects.filter(student=second).exists())

    def test_every_request_past_capacity_fails(self) -> None:
        room = _room(capacity=2)
        students = _students(5)
        ledger = BookingLedger()
        stale = Room.objects.select_related("block").get(pk=room.pk)
        ledger.rooms.get_room = lambda room_id: stale

        outcomes = []
        for student in students:
            try:
                ledger.create_booking(student.pk, room.pk, SEMESTER)
                outcomes.append("ok")
            except RoomFull:
                outcomes.append("full")

        self.assertEqual(outcomes, ["ok", "ok", "full", "full", "full"])
        room.refresh_from_db()
        self.assertEqual(room.current_occupancy, 2)
        self.assertEqual(Booking.objects.active().filter(room=room).count(), 2)


class ParallelBookingTests(TransactionTestCase):
    """Real threads, each on its own database connection."""

    WORKERS = 6

    def setUp(self) -> None:
        if connection.vendor == "sqlite" and connection.is_in_memory_db():
            self.skipTest("threads need a shared file or server database")

    def _race(self, attempts) -> list[str]:
        barrier = threading.Barrier(len(attempts))
        results: list[str] = []
        lock = threading.Lock()

        def run(attempt) -> None:
            try:
                barrier.wait()
                attempt()
                outcome = "ok"
            except RoomFull:
                outcome = "full"
            except DuplicateActiveBooking:
                outcome = "duplicate"
            finally:
                connection.close()
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=run, args=(attempt,)) for attempt in attempts]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return results

    def test_last_place_goes_to_exactly_one_request(self) -> None:
        room = _room(capacity=1)
        students = _students(self.WORKERS)

        results = self._race([
            partial(BookingLedger().create_booking, student.pk, room.pk, SEMESTER)
            for student in students
        ])

        self.assertEqual(results.count("ok"), 1)
        self.assertEqual(results.count("full"), self.WORKERS - 1)
        room.refresh_from_db()
        self.assertEqual(room.current_occupancy, 1)
        self.assertEqual(Booking.objects.filter(room=room).count(), 1)

    def test_one_student_racing_for_two_rooms_gets_one(self) -> None:
        block = HostelBlock.objects.create(name="West Hall")
        rooms = [
            Room.objects.create(
                block=block, room_number=str(n), capacity=2, price_per_semester=Decimal("25000.00")
            )
            for n in range(2)
        ]
        (student,) = _students(1)

        results = self._race([
            partial(BookingLedger().create_booking, student.pk, room.pk, SEMESTER)
            for room in rooms
        ])

        self.assertEqual(sorted(results), ["duplicate", "ok"])
        self.assertEqual(Booking.objects.filter(student=student).count(), 1)
        total = sum(Room.objects.filter(block=block).values_list("current_occupancy", flat=True))
        self.assertEqual(total, 1)
