"""
Housing Command Handlers

The use cases exposed to the API layer. Views build a command and send
it through the message bus; the handler delegates to the booking ledger,
which owns the transaction.

Commands:
- CreateBookingCommand: Student books a place in a room for a semester
- TransitionBookingCommand: Student cancels, or admin re-statuses, a booking
"""

from dataclasses import dataclass
import logging

from apps.housing.domain.transitions import Actor
from apps.housing.models import Booking
from apps.housing.services import BookingLedger

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass(frozen=True)
class CreateBookingCommand:
    student_id: int
    room_id: int
    semester: str


@dataclass(frozen=True)
class TransitionBookingCommand:
    booking_id: int
    status: str
    actor: Actor


# ===== Command Handlers =====

class CreateBookingHandler:
    """Handler for CreateBooking command"""

    def __init__(self, ledger: BookingLedger | None = None):
        self.ledger = ledger or BookingLedger()

    def __call__(self, command: CreateBookingCommand) -> Booking:
        return self.handle(command)

    def handle(self, command: CreateBookingCommand) -> Booking:
        logger.info(
            f"Creating booking for student {command.student_id}, "
            f"room {command.room_id}, semester {command.semester}"
        )
        return self.ledger.create_booking(
            student_id=command.student_id,
            room_id=command.room_id,
            semester=command.semester,
        )


class TransitionBookingHandler:
    """Handler for TransitionBooking command"""

    def __init__(self, ledger: BookingLedger | None = None):
        self.ledger = ledger or BookingLedger()

    def __call__(self, command: TransitionBookingCommand) -> Booking:
        return self.handle(command)

    def handle(self, command: TransitionBookingCommand) -> Booking:
        logger.info(
            f"Transitioning booking {command.booking_id} to {command.status} "
            f"(actor {command.actor.user_id})"
        )
        return self.ledger.transition_booking(
            booking_id=command.booking_id,
            new_status=command.status,
            actor=command.actor,
        )


def register_handlers(bus) -> None:
    """Wire housing commands into the message bus (idempotent)."""
    if not bus.has_command_handler(CreateBookingCommand):
        bus.register_command_handler(CreateBookingCommand, CreateBookingHandler())
    if not bus.has_command_handler(TransitionBookingCommand):
        bus.register_command_handler(TransitionBookingCommand, TransitionBookingHandler())
