"""
Housing Domain Events

Events that represent things that have happened to room bookings.
These are published after successful transaction commits.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A student submitted a booking (status PENDING)

    Triggers:
    - "Room Booking Submitted" notification to the student
    """
    booking_id: int
    student_id: int
    room_id: int
    room_number: str
    semester: str


@dataclass(kw_only=True)
class BookingStatusChanged(DomainEvent):
    """
    Event: Booking moved between statuses

    Triggers:
    - Status update notification to the booking's student
    """
    booking_id: int
    student_id: int
    room_id: int
    old_status: str
    new_status: str
    changed_by: int
