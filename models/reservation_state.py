"""
Reservation status management.
Defines reservation statuses, payment methods and allowed status transitions.
"""

from enum import Enum

from models.errors import InvalidStatusTransition, ValidationError
from utils.messages import MESSAGES


# =============================================================================
# CONSTANTS
# =============================================================================

class ReservationStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


class PaymentMethod(str, Enum):
    CASH = 'cash'
    TRANSFER = 'transfer'


# Statuses that occupy a room for conflict purposes
ACTIVE_STATUSES = (ReservationStatus.PENDING.value, ReservationStatus.CONFIRMED.value)

# Allowed transitions. A cancelled reservation has released its room and
# cannot be reactivated.
VALID_TRANSITIONS = {
    ReservationStatus.PENDING: {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED},
    ReservationStatus.CONFIRMED: {ReservationStatus.CANCELLED},
    ReservationStatus.CANCELLED: set(),
}

STATUS_LABELS = {
    ReservationStatus.PENDING: 'Pendiente',
    ReservationStatus.CONFIRMED: 'Confirmada',
    ReservationStatus.CANCELLED: 'Cancelada',
}

PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: 'Efectivo',
    PaymentMethod.TRANSFER: 'Transferencia',
}


# =============================================================================
# PARSING
# =============================================================================

def parse_status(value) -> ReservationStatus:
    """
    Parse a status value.

    Raises:
        ValidationError: If the value is not a known status
    """
    try:
        return ReservationStatus(value)
    except ValueError:
        raise ValidationError(MESSAGES['invalid_status'].format(value=value))


def parse_payment_method(value) -> PaymentMethod:
    """
    Parse a payment method value.

    Raises:
        ValidationError: If the value is not 'cash' or 'transfer'
    """
    try:
        return PaymentMethod(value)
    except ValueError:
        raise ValidationError(MESSAGES['invalid_payment_method'].format(value=value))


def is_active(status) -> bool:
    """Whether a reservation with this status occupies its room."""
    return ReservationStatus(status).value in ACTIVE_STATUSES


# =============================================================================
# STATE TRANSITIONS
# =============================================================================

def validate_status_transition(current_status, new_status) -> ReservationStatus:
    """
    Validate a reservation status change.

    Keeping the same status is always allowed.

    Args:
        current_status: Status stored on the reservation
        new_status: Requested status

    Returns:
        ReservationStatus: The parsed new status

    Raises:
        ValidationError: If new_status is not a known status
        InvalidStatusTransition: If the transition is not allowed
    """
    current = parse_status(current_status)
    new = parse_status(new_status)

    if current == new:
        return new

    if new not in VALID_TRANSITIONS[current]:
        raise InvalidStatusTransition(
            MESSAGES['invalid_transition'].format(
                current=STATUS_LABELS[current], new=STATUS_LABELS[new]
            ),
            current=current.value,
            requested=new.value,
        )

    return new


def get_allowed_transitions(current_status) -> list:
    """List the statuses reachable from the given status."""
    current = parse_status(current_status)
    return sorted(s.value for s in VALID_TRANSITIONS[current])
