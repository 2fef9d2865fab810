"""
Booking Status Finite State Machine

State transitions are an explicit table of
``(current status, requested status, actor role)`` triples. A triple
that is not in the table is denied.

- STUDENT: PENDING -> CANCELLED, CONFIRMED -> CANCELLED (own bookings only)
- ADMIN: any status -> any other status

Self-transitions (e.g. CANCELLED -> CANCELLED) are never allowed, so a
repeated cancel cannot release the same place twice.
"""

from dataclasses import dataclass
from enum import Enum
from itertools import product

from .exceptions import InvalidTransition, Unauthorized


class BookingStatus(str, Enum):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    REJECTED = 'REJECTED'
    CANCELLED = 'CANCELLED'


class ActorRole(str, Enum):
    STUDENT = 'STUDENT'
    ADMIN = 'ADMIN'
    FACULTY = 'FACULTY'
    LANDLORD = 'LANDLORD'


# Active bookings hold a place in the room; terminal ones do not.
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset({BookingStatus.REJECTED, BookingStatus.CANCELLED})

STUDENT_TARGETS = frozenset({BookingStatus.CANCELLED})
ADMIN_TARGETS = frozenset(BookingStatus)

TRANSITIONS = frozenset(
    [
        (BookingStatus.PENDING, BookingStatus.CANCELLED, ActorRole.STUDENT),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED, ActorRole.STUDENT),
    ]
    + [
        (current, requested, ActorRole.ADMIN)
        for current, requested in product(BookingStatus, ADMIN_TARGETS)
        if current != requested
    ]
)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as supplied by the auth layer."""
    user_id: int
    role: ActorRole

    @classmethod
    def from_user(cls, user) -> 'Actor':
        try:
            role = ActorRole(getattr(user, 'role', ''))
        except ValueError:
            raise Unauthorized(f"User {user.pk} has no campus role")
        return cls(user_id=user.pk, role=role)

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == ActorRole.STUDENT


def is_allowed(current: BookingStatus, requested: BookingStatus, role: ActorRole) -> bool:
    return (BookingStatus(current), BookingStatus(requested), ActorRole(role)) in TRANSITIONS


def authorize_transition(
    current: BookingStatus,
    requested: BookingStatus,
    actor: Actor,
    owner_id: int,
) -> None:
    """
    Check that ``actor`` may move a booking owned by ``owner_id``.

    Raises:
        Unauthorized: wrong role, foreign booking, or a target status
            the role may never request
        InvalidTransition: the role may request this status, just not
            from the current one
    """
    current = BookingStatus(current)
    requested = BookingStatus(requested)

    if actor.role == ActorRole.STUDENT:
        if actor.user_id != owner_id:
            raise Unauthorized("Students may only change their own bookings")
        if requested not in STUDENT_TARGETS:
            raise Unauthorized("Students can only cancel bookings")
    elif actor.role != ActorRole.ADMIN:
        raise Unauthorized(f"Role {actor.role.value} cannot change bookings")

    if not is_allowed(current, requested, actor.role):
        raise InvalidTransition(current.value, requested.value)


def occupancy_delta(current: BookingStatus, requested: BookingStatus) -> int:
    """
    Change in room occupancy implied by a status change.

    -1 when an active booking becomes terminal, +1 when a terminal one
    is reopened, 0 when the booking stays on the same side.
    """
    was_active = BookingStatus(current) in ACTIVE_STATUSES
    is_active = BookingStatus(requested) in ACTIVE_STATUSES
    if was_active and not is_active:
        return -1
    if is_active and not was_active:
        return 1
    return 0
