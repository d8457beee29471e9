"""
Reservation data access functions.
Handles reservation CRUD, status transitions, availability checking and
pricing.

This module re-exports all functions from the split modules:
- reservation_state.py: Statuses, payment methods and transitions
- reservation_availability.py: Conflict detection, pricing and room search
- reservation_crud.py: Create, update, delete
- reservation_queries.py: Listing and detail lookups
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# State management
from .reservation_state import (
    ReservationStatus,
    PaymentMethod,
    ACTIVE_STATUSES,
    VALID_TRANSITIONS,
    validate_status_transition,
    get_allowed_transitions,
    parse_status,
    parse_payment_method,
)

# Availability and pricing
from .reservation_availability import (
    normalize_range,
    calculate_nights,
    get_conflicting_reservations,
    has_conflict,
    compute_price,
    get_available_rooms,
    quote_stay,
)

# CRUD operations
from .reservation_crud import (
    ALLOWED_UPDATE_FIELDS,
    create_reservation,
    update_reservation,
    cancel_reservation,
    delete_reservation,
    notify_reservation_created,
)

# Queries
from .reservation_queries import (
    get_reservation_by_id,
    get_reservation_with_details,
    get_reservations,
    get_reservation_notice,
)

__all__ = [
    'ReservationStatus', 'PaymentMethod', 'ACTIVE_STATUSES', 'VALID_TRANSITIONS',
    'validate_status_transition', 'get_allowed_transitions', 'parse_status',
    'parse_payment_method',
    'normalize_range', 'calculate_nights', 'get_conflicting_reservations',
    'has_conflict', 'compute_price', 'get_available_rooms', 'quote_stay',
    'ALLOWED_UPDATE_FIELDS', 'create_reservation', 'update_reservation',
    'cancel_reservation', 'delete_reservation', 'notify_reservation_created',
    'get_reservation_by_id', 'get_reservation_with_details', 'get_reservations',
    'get_reservation_notice',
]
