"""
Reservation query functions.
Handles reservation listing, detail lookups and the read-only views handed
to the notification and contract collaborators.
"""

from flask import current_app

from database import get_db
from utils.datetime_helpers import get_period_window

_DETAIL_SELECT = '''
    SELECT r.*,
           rm.number AS room_number,
           rm.room_type AS room_type,
           rm.price AS room_price,
           u.username AS username
    FROM reservations r
    JOIN rooms rm ON r.room_id = rm.id
    LEFT JOIN users u ON r.user_id = u.id
'''

LISTING_PERIODS = ('week', 'month', 'year')


def get_reservation_by_id(reservation_id: int) -> dict:
    """
    Get reservation row by ID.

    Args:
        reservation_id: Reservation ID

    Returns:
        Reservation dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM reservations WHERE id = ?', (reservation_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_reservation_with_details(reservation_id: int) -> dict:
    """
    Get reservation with room and user information.

    Args:
        reservation_id: Reservation ID

    Returns:
        Reservation dict with room_number, room_type, room_price and username,
        or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(_DETAIL_SELECT + ' WHERE r.id = ?', (reservation_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_reservations(period: str = None, room_id: int = None, status: str = None) -> list:
    """
    List reservations with room and user details, ordered by start date.

    Args:
        period: 'week', 'month' or 'year' to keep reservations starting in
            the current period; any other value lists everything
        room_id: Filter by room (optional)
        status: Filter by status (optional)

    Returns:
        List of reservation dicts
    """
    conditions = []
    params = []

    window = get_period_window(period) if period in LISTING_PERIODS else None
    if window:
        conditions.append('r.start_date >= ? AND r.start_date < ?')
        params.extend([window[0].isoformat(), window[1].isoformat()])

    if room_id:
        conditions.append('r.room_id = ?')
        params.append(room_id)

    if status:
        conditions.append('r.status = ?')
        params.append(status)

    query = _DETAIL_SELECT
    if conditions:
        query += ' WHERE ' + ' AND '.join(conditions)
    query += ' ORDER BY r.start_date, r.id'

    db = get_db()
    cursor = db.cursor()
    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_reservation_notice(reservation_id: int):
    """
    Build the read-only confirmation email view of a reservation.

    Args:
        reservation_id: Reservation ID

    Returns:
        ReservationNotice, or None if the reservation does not exist or has
        no guest email
    """
    from models.payment_config import get_payment_config
    from services.notifications import ReservationNotice

    reservation = get_reservation_with_details(reservation_id)
    if not reservation or not reservation.get('guest_email'):
        return None

    return ReservationNotice(
        reservation_id=reservation['id'],
        guest_name=reservation.get('guest_name') or reservation.get('username') or 'Estimado Huésped',
        guest_email=reservation['guest_email'],
        room_number=reservation['room_number'],
        room_type=reservation['room_type'],
        start_date=reservation['start_date'],
        end_date=reservation['end_date'],
        total_price=reservation['total_price'],
        payment_method=reservation['payment_method'],
        payment_config=get_payment_config(),
        hotel_name=current_app.config.get('HOTEL_NAME', 'Palapa La Casona'),
        currency=current_app.config.get('CURRENCY', 'MXN'),
    )
