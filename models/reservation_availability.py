"""
Room availability checking and nightly pricing.

Reservation ranges are half-open: [start, end). Two ranges overlap when
existing.start < new.end AND existing.end > new.start, so a booking that
ends on the day another begins does not conflict.
"""

from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

from database import get_db
from models.errors import InvalidRange, InvalidStay, RoomNotFound
from utils.messages import MESSAGES
from utils.validators import parse_datetime, format_datetime
from .reservation_state import ACTIVE_STATUSES

_ACTIVE_PLACEHOLDERS = ','.join('?' * len(ACTIVE_STATUSES))

CENTS = Decimal('0.01')


# =============================================================================
# RANGE HELPERS
# =============================================================================

def normalize_range(start, end) -> tuple:
    """
    Parse and validate a stay range.

    Args:
        start: Start date/datetime (datetime or ISO string)
        end: End date/datetime, exclusive

    Returns:
        tuple: (start, end) as naive datetimes

    Raises:
        ValidationError: If either value is missing or malformed
        InvalidRange: If start is not strictly before end
    """
    start_dt = parse_datetime(start)
    end_dt = parse_datetime(end)
    if start_dt >= end_dt:
        raise InvalidRange(MESSAGES['invalid_date_range'])
    return start_dt, end_dt


def calculate_nights(start: datetime, end: datetime) -> int:
    """
    Number of nights billed for a stay.

    Partial days round up, but a stay must cover at least 24 hours.

    Raises:
        InvalidStay: If the stay is shorter than one day
    """
    delta = end - start
    if delta < timedelta(days=1):
        raise InvalidStay(MESSAGES['invalid_stay'])
    nights = delta.days
    if delta.seconds or delta.microseconds:
        nights += 1
    return nights


# =============================================================================
# CONFLICT DETECTION
# =============================================================================

def get_conflicting_reservations(
    room_id: int,
    start,
    end,
    exclude_reservation_id: int = None,
    cursor=None
) -> list:
    """
    Get active reservations of a room overlapping [start, end).

    Args:
        room_id: Room ID
        start: Range start
        end: Range end (exclusive)
        exclude_reservation_id: Reservation ID to exclude (for updates)
        cursor: Active transaction cursor

    Returns:
        list: Dicts with id, start_date, end_date, status

    Raises:
        InvalidRange: If start is not strictly before end
    """
    start_dt, end_dt = normalize_range(start, end)

    cur = cursor or get_db().cursor()

    query = f'''
        SELECT id, start_date, end_date, status
        FROM reservations
        WHERE room_id = ?
          AND status IN ({_ACTIVE_PLACEHOLDERS})
          AND start_date < ?
          AND end_date > ?
    '''
    params = [room_id, *ACTIVE_STATUSES, format_datetime(end_dt), format_datetime(start_dt)]

    # Exclude specific reservation (for updates)
    if exclude_reservation_id:
        query += ' AND id != ?'
        params.append(exclude_reservation_id)

    query += ' ORDER BY start_date'

    cur.execute(query, params)
    return [dict(row) for row in cur.fetchall()]


def has_conflict(
    room_id: int,
    start,
    end,
    exclude_reservation_id: int = None,
    cursor=None
) -> bool:
    """
    Check whether a room has an active reservation overlapping [start, end).

    Args:
        room_id: Room ID
        start: Range start
        end: Range end (exclusive)
        exclude_reservation_id: Reservation ID to exclude, so an edited
            reservation does not conflict with itself
        cursor: Active transaction cursor

    Returns:
        bool: True if at least one overlapping active reservation exists

    Raises:
        InvalidRange: If start is not strictly before end
    """
    return len(get_conflicting_reservations(
        room_id, start, end,
        exclude_reservation_id=exclude_reservation_id,
        cursor=cursor
    )) > 0


# =============================================================================
# PRICING
# =============================================================================

def compute_price(room_id: int, start, end, cursor=None) -> Decimal:
    """
    Total price of a stay: nights x nightly rate, rounded to cents.

    Args:
        room_id: Room ID
        start: Stay start
        end: Stay end (exclusive)
        cursor: Active transaction cursor

    Returns:
        Decimal: Total price with two decimals

    Raises:
        RoomNotFound: If the room does not exist
        InvalidStay: If the stay is shorter than one night
    """
    cur = cursor or get_db().cursor()
    cur.execute('SELECT price FROM rooms WHERE id = ?', (room_id,))
    row = cur.fetchone()
    if not row:
        raise RoomNotFound(MESSAGES['room_not_found'])

    nights = calculate_nights(parse_datetime(start), parse_datetime(end))
    rate = Decimal(str(row['price']))
    return (rate * nights).quantize(CENTS, rounding=ROUND_HALF_UP)


# =============================================================================
# ROOM SEARCH
# =============================================================================

def get_available_rooms(start, end) -> list:
    """
    Get rooms with no active reservation overlapping [start, end).

    Args:
        start: Window start
        end: Window end (exclusive)

    Returns:
        list: Room dicts ordered by number, each with its images

    Raises:
        InvalidRange: If start is not strictly before end
    """
    from .room import attach_images

    start_dt, end_dt = normalize_range(start, end)

    db = get_db()
    cursor = db.cursor()
    cursor.execute(f'''
        SELECT * FROM rooms
        WHERE id NOT IN (
            SELECT room_id FROM reservations
            WHERE status IN ({_ACTIVE_PLACEHOLDERS})
              AND start_date < ?
              AND end_date > ?
        )
        ORDER BY number
    ''', (*ACTIVE_STATUSES, format_datetime(end_dt), format_datetime(start_dt)))

    return attach_images([dict(row) for row in cursor.fetchall()])


def quote_stay(room_id: int, start, end, exclude_reservation_id: int = None) -> dict:
    """
    Availability and price quote for a prospective stay.

    Args:
        room_id: Room ID
        start: Stay start
        end: Stay end (exclusive)
        exclude_reservation_id: Reservation being edited (optional)

    Returns:
        dict: {'available': bool, 'conflicts': [ids], 'nights': int,
               'total_price': float}

    Raises:
        InvalidRange, InvalidStay, RoomNotFound
    """
    start_dt, end_dt = normalize_range(start, end)
    total = compute_price(room_id, start_dt, end_dt)
    conflicts = get_conflicting_reservations(
        room_id, start_dt, end_dt, exclude_reservation_id=exclude_reservation_id
    )
    return {
        'available': not conflicts,
        'conflicts': [c['id'] for c in conflicts],
        'nights': calculate_nights(start_dt, end_dt),
        'total_price': float(total),
    }
