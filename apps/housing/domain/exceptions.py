"""
Housing Domain Exceptions

Every failure the booking ledger can report is a distinct class so
callers can branch on it. Each class carries:

- ``code``: stable machine-readable identifier used in API responses
- ``http_status``: status the API layer maps the error to
- ``is_expected``: True for ordinary business outcomes (a full room,
  a duplicate request) that are not system failures
"""


class HousingError(Exception):
    """Base class for booking ledger errors."""

    code = "housing_error"
    http_status = 400
    is_expected = True


class RoomNotFound(HousingError):
    code = "room_not_found"
    http_status = 404

    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class RoomFull(HousingError):
    """Raised when a room has no free place left."""

    code = "room_full"

    def __init__(self, room_id, message: str | None = None):
        self.room_id = room_id
        super().__init__(message or f"Room {room_id} is full")


class CapacityExceeded(RoomFull):
    """
    Raised by the occupancy reconciler when the conditional increment
    finds the room already at capacity.

    This is the authoritative form of RoomFull: the pre-check may have
    passed on a stale read, but the atomic update did not.
    """

    def __init__(self, room_id):
        super().__init__(room_id, f"Room {room_id} reached its capacity")


class DuplicateActiveBooking(HousingError):
    code = "duplicate_active_booking"

    def __init__(self, student_id, semester: str):
        self.student_id = student_id
        self.semester = semester
        super().__init__(
            f"Student {student_id} already has an active booking for {semester}"
        )


class BookingNotFound(HousingError):
    code = "booking_not_found"
    http_status = 404

    def __init__(self, booking_id):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found")


class Unauthorized(HousingError):
    """Actor's role or ownership does not allow the requested change."""

    code = "unauthorized"
    http_status = 403


class InvalidTransition(HousingError):
    """Requested status is not reachable from the current one."""

    code = "invalid_transition"

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Illegal booking transition: {from_status} -> {to_status}")


class InvariantViolation(HousingError):
    """
    Occupancy would leave [0, capacity].

    Indicates a bug in the atomicity contract, never a user error.
    """

    code = "invariant_violation"
    http_status = 500
    is_expected = False

    def __init__(self, room_id, message: str):
        self.room_id = room_id
        super().__init__(message)
