"""
Reservation CRUD operations.
Handles create, update and delete for room reservations.

Writes that can change occupancy run the conflict check and the write inside
one BEGIN IMMEDIATE transaction, so concurrent writers are serialized by the
database write lock. The reservations_no_overlap_* triggers reject anything
that still overlaps.
"""

import logging
import sqlite3

from database import get_db
from models.errors import (
    DoubleBooking, ReservationNotFound, RoomNotFound, UserNotFound, ValidationError
)
from utils.messages import MESSAGES
from utils.validators import (
    format_datetime, normalize_phone, sanitize_input, validate_email
)
from .reservation_availability import (
    compute_price, get_conflicting_reservations, normalize_range
)
from .reservation_queries import get_reservation_with_details, get_reservation_notice
from .reservation_state import (
    ACTIVE_STATUSES, ReservationStatus, parse_payment_method, validate_status_transition
)

logger = logging.getLogger(__name__)

# Fields a client may change on an existing reservation
ALLOWED_UPDATE_FIELDS = (
    'room_id', 'user_id', 'guest_name', 'guest_email', 'guest_phone',
    'start_date', 'end_date', 'status', 'payment_method'
)

OCCUPANCY_FIELDS = ('room_id', 'start_date', 'end_date')


# =============================================================================
# FIELD HELPERS
# =============================================================================

def _parse_room_id(value) -> int:
    if isinstance(value, bool):
        raise RoomNotFound(MESSAGES['room_not_found'])
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RoomNotFound(MESSAGES['room_not_found'])


def _clean_email(email):
    email = sanitize_input(email, max_length=254)
    if not email:
        return None
    if not validate_email(email):
        raise ValidationError(MESSAGES['invalid_email'])
    return email


def _resolve_user_id(cursor, user_id):
    """Validate an optional user reference. Empty values clear the link."""
    if user_id is None or user_id == '':
        return None
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise UserNotFound(MESSAGES['user_not_found'])
    cursor.execute('SELECT 1 FROM users WHERE id = ?', (user_id,))
    if not cursor.fetchone():
        raise UserNotFound(MESSAGES['user_not_found'])
    return user_id


def _ensure_available(cursor, room_id, start, end, exclude_reservation_id=None):
    conflicts = get_conflicting_reservations(
        room_id, start, end,
        exclude_reservation_id=exclude_reservation_id,
        cursor=cursor
    )
    if conflicts:
        logger.warning(
            'Double booking rejected for room %s [%s, %s): overlaps reservation(s) %s',
            room_id, start, end, [c['id'] for c in conflicts]
        )
        raise DoubleBooking(
            MESSAGES['double_booking'],
            conflicts=[c['id'] for c in conflicts]
        )


def _translate_integrity_error(error: sqlite3.IntegrityError):
    if 'double_booking' in str(error):
        logger.warning('Overlap trigger rejected a reservation write: %s', error)
        return DoubleBooking(MESSAGES['double_booking'])
    return error


# =============================================================================
# CREATE
# =============================================================================

def create_reservation(
    room_id,
    start_date,
    end_date,
    payment_method: str,
    user_id=None,
    guest_name: str = None,
    guest_email: str = None,
    guest_phone: str = None
) -> dict:
    """
    Create a pending reservation after checking room availability.

    Args:
        room_id: Room ID
        start_date: Arrival (ISO date or datetime)
        end_date: Departure (ISO date or datetime, exclusive)
        payment_method: 'cash' or 'transfer'
        user_id: Registered user making the booking (optional)
        guest_name: Guest name for non-registered guests
        guest_email: Guest email, used for the confirmation email
        guest_phone: Guest phone (10 digits)

    Returns:
        dict: Created reservation with room details

    Raises:
        ValidationError: If required fields are missing or malformed
        InvalidRange: If start_date is not before end_date
        InvalidStay: If the stay is shorter than one night
        RoomNotFound: If the room does not exist
        UserNotFound: If user_id does not reference a user
        DoubleBooking: If the room is already booked for part of the range
    """
    if not room_id or not start_date or not end_date or not payment_method:
        raise ValidationError(MESSAGES['reservation_required_fields'])

    method = parse_payment_method(payment_method)
    start_dt, end_dt = normalize_range(start_date, end_date)
    room_id = _parse_room_id(room_id)
    guest_name = sanitize_input(guest_name, max_length=120) or None
    guest_email = _clean_email(guest_email)
    guest_phone = normalize_phone(guest_phone)

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        user_id = _resolve_user_id(cursor, user_id)

        # Check availability before pricing and writing
        _ensure_available(cursor, room_id, start_dt, end_dt)

        total_price = compute_price(room_id, start_dt, end_dt, cursor=cursor)

        cursor.execute('''
            INSERT INTO reservations (
                room_id, user_id, guest_name, guest_email, guest_phone,
                start_date, end_date, status, total_price, payment_method
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            room_id, user_id, guest_name, guest_email, guest_phone,
            format_datetime(start_dt), format_datetime(end_dt),
            ReservationStatus.PENDING.value, float(total_price), method.value
        ))
        reservation_id = cursor.lastrowid

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        raise _translate_integrity_error(e)
    except Exception:
        db.rollback()
        raise

    logger.info('Reservation %s created for room %s [%s, %s) total %s',
                reservation_id, room_id, start_dt, end_dt, total_price)

    if guest_email:
        notify_reservation_created(reservation_id)
    else:
        logger.warning('No confirmation email sent for reservation %s: guest email missing',
                       reservation_id)

    return get_reservation_with_details(reservation_id)


def notify_reservation_created(reservation_id: int) -> None:
    """
    Hand the confirmation email for a committed reservation to the notifier.
    Failures are logged and never reach the caller.
    """
    from extensions import notifier

    try:
        notice = get_reservation_notice(reservation_id)
        if notice is not None:
            notifier.notify(notice)
    except Exception:
        logger.exception('Could not queue confirmation email for reservation %s', reservation_id)


# =============================================================================
# UPDATE
# =============================================================================

def update_reservation(reservation_id: int, updates: dict) -> dict:
    """
    Update a reservation.

    Only ALLOWED_UPDATE_FIELDS are applied. Changing the room or either date
    re-runs the availability check (excluding this reservation) and
    recomputes the price; status-only and payment-only edits do not.

    Args:
        reservation_id: Reservation ID
        updates: Field values to change

    Returns:
        dict: Updated reservation with room details

    Raises:
        ReservationNotFound: If the reservation does not exist
        ValidationError: If no allowed field is given or a value is invalid
        InvalidStatusTransition: If the status change is not allowed
        InvalidRange / InvalidStay: If the new dates are invalid
        RoomNotFound: If the new room does not exist
        DoubleBooking: If the new room/dates overlap another active reservation
    """
    updates = {k: v for k, v in (updates or {}).items() if k in ALLOWED_UPDATE_FIELDS}
    if not updates:
        raise ValidationError(MESSAGES['no_fields_to_update'])

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('SELECT * FROM reservations WHERE id = ?', (reservation_id,))
        row = cursor.fetchone()
        if not row:
            raise ReservationNotFound(MESSAGES['reservation_not_found'])
        existing = dict(row)

        changes = {}

        if 'status' in updates:
            changes['status'] = validate_status_transition(existing['status'], updates['status']).value

        if 'payment_method' in updates:
            changes['payment_method'] = parse_payment_method(updates['payment_method']).value

        if 'user_id' in updates:
            changes['user_id'] = _resolve_user_id(cursor, updates['user_id'])

        if 'guest_name' in updates:
            changes['guest_name'] = sanitize_input(updates['guest_name'], max_length=120) or None

        if 'guest_email' in updates:
            changes['guest_email'] = _clean_email(updates['guest_email'])

        if 'guest_phone' in updates:
            changes['guest_phone'] = normalize_phone(updates['guest_phone'])

        if any(field in updates for field in OCCUPANCY_FIELDS):
            room_id = _parse_room_id(updates.get('room_id', existing['room_id']))
            start_dt, end_dt = normalize_range(
                updates.get('start_date', existing['start_date']),
                updates.get('end_date', existing['end_date'])
            )

            target_status = changes.get('status', existing['status'])
            if target_status in ACTIVE_STATUSES:
                _ensure_available(cursor, room_id, start_dt, end_dt,
                                  exclude_reservation_id=reservation_id)

            total_price = compute_price(room_id, start_dt, end_dt, cursor=cursor)

            changes.update({
                'room_id': room_id,
                'start_date': format_datetime(start_dt),
                'end_date': format_datetime(end_dt),
                'total_price': float(total_price),
            })

        if changes:
            set_clause = ', '.join(f'{column} = ?' for column in changes)
            cursor.execute(
                f'UPDATE reservations SET {set_clause}, updated_at = CURRENT_TIMESTAMP WHERE id = ?',
                [*changes.values(), reservation_id]
            )

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        raise _translate_integrity_error(e)
    except Exception:
        db.rollback()
        raise

    logger.info('Reservation %s updated: %s', reservation_id, sorted(changes))
    return get_reservation_with_details(reservation_id)


def cancel_reservation(reservation_id: int) -> dict:
    """Cancel a reservation, releasing its room for the booked dates."""
    return update_reservation(reservation_id, {'status': ReservationStatus.CANCELLED.value})


# =============================================================================
# DELETE
# =============================================================================

def delete_reservation(reservation_id: int) -> None:
    """
    Delete a reservation. The room is left untouched.

    Args:
        reservation_id: Reservation ID

    Raises:
        ReservationNotFound: If the reservation does not exist
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM reservations WHERE id = ?', (reservation_id,))
    if cursor.rowcount == 0:
        db.rollback()
        raise ReservationNotFound(MESSAGES['reservation_not_found'])
    db.commit()
    logger.info('Reservation %s deleted', reservation_id)
