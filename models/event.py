"""
Social-area event data access functions.
Handles CRUD for social-area rentals. Several events may share a date: the
area is not capacity-limited, so no conflict check is made.
"""

from database import get_db
from models.errors import EventNotFound, ValidationError
from utils.messages import MESSAGES
from utils.validators import (
    normalize_phone, parse_amount, parse_datetime, parse_positive_int,
    sanitize_input, validate_time_format
)
from .reservation_state import parse_status

DEFAULT_RENTED_AREA = 'Área Social'

EVENT_FIELDS = (
    'client_name', 'client_phone', 'event_date', 'start_time', 'end_time',
    'usage_description', 'attendee_limit', 'rented_area', 'amount', 'status'
)


def _clean_time(value):
    if value is None or value == '':
        return None
    if not validate_time_format(str(value)):
        raise ValidationError(MESSAGES['invalid_time'].format(value=value))
    return str(value)


def _clean_event_fields(data: dict) -> dict:
    """Validate and normalize the event fields present in data."""
    fields = {}

    if 'client_name' in data:
        name = sanitize_input(data['client_name'], max_length=120)
        if not name:
            raise ValidationError(MESSAGES['event_required_fields'])
        fields['client_name'] = name

    if 'client_phone' in data:
        fields['client_phone'] = normalize_phone(data['client_phone'])

    if 'event_date' in data:
        if not data['event_date']:
            raise ValidationError(MESSAGES['event_required_fields'])
        fields['event_date'] = parse_datetime(data['event_date']).date().isoformat()

    if 'start_time' in data:
        fields['start_time'] = _clean_time(data['start_time'])

    if 'end_time' in data:
        fields['end_time'] = _clean_time(data['end_time'])

    if 'usage_description' in data:
        fields['usage_description'] = sanitize_input(data['usage_description'], max_length=1000) or None

    if 'attendee_limit' in data:
        if data['attendee_limit'] in (None, ''):
            fields['attendee_limit'] = None
        else:
            fields['attendee_limit'] = parse_positive_int(data['attendee_limit'], 'invalid_attendee_limit')

    if 'rented_area' in data:
        fields['rented_area'] = sanitize_input(data['rented_area'], max_length=120) or DEFAULT_RENTED_AREA

    if 'amount' in data:
        fields['amount'] = float(parse_amount(data['amount'], 'invalid_amount'))

    if 'status' in data:
        fields['status'] = parse_status(data['status']).value

    return fields


def _check_time_window(start_time, end_time):
    if start_time and end_time and end_time <= start_time:
        raise ValidationError(MESSAGES['invalid_time_window'])


def get_all_events() -> list:
    """
    Get all events ordered by date.

    Returns:
        List of event dicts
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM events ORDER BY event_date, start_time, id')
    return [dict(row) for row in cursor.fetchall()]


def get_event_by_id(event_id: int) -> dict:
    """
    Get event by ID.

    Args:
        event_id: Event ID

    Returns:
        Event dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM events WHERE id = ?', (event_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_event(data: dict) -> dict:
    """
    Create a social-area event.

    Args:
        data: Event fields; client_name, event_date and amount are required

    Returns:
        Created event dict

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    data = {k: v for k, v in (data or {}).items() if k in EVENT_FIELDS}
    if not data.get('client_name') or not data.get('event_date') or data.get('amount') is None:
        raise ValidationError(MESSAGES['event_required_fields'])

    fields = _clean_event_fields(data)
    fields.setdefault('rented_area', DEFAULT_RENTED_AREA)
    fields.setdefault('status', 'pending')
    _check_time_window(fields.get('start_time'), fields.get('end_time'))

    columns = ', '.join(fields)
    placeholders = ', '.join('?' * len(fields))

    db = get_db()
    cursor = db.cursor()
    cursor.execute(f'INSERT INTO events ({columns}) VALUES ({placeholders})', list(fields.values()))
    db.commit()

    return get_event_by_id(cursor.lastrowid)


def update_event(event_id: int, data: dict) -> dict:
    """
    Update an event.

    Args:
        event_id: Event ID
        data: Fields to change (unknown keys are ignored)

    Returns:
        Updated event dict

    Raises:
        EventNotFound: If event does not exist
        ValidationError: If no field is given or a value is invalid
    """
    data = {k: v for k, v in (data or {}).items() if k in EVENT_FIELDS}
    if not data:
        raise ValidationError(MESSAGES['no_fields_to_update'])

    existing = get_event_by_id(event_id)
    if not existing:
        raise EventNotFound(MESSAGES['event_not_found'])

    fields = _clean_event_fields(data)
    _check_time_window(
        fields.get('start_time', existing['start_time']),
        fields.get('end_time', existing['end_time'])
    )

    set_clause = ', '.join(f'{column} = ?' for column in fields)

    db = get_db()
    db.execute(
        f'UPDATE events SET {set_clause}, updated_at = CURRENT_TIMESTAMP WHERE id = ?',
        [*fields.values(), event_id]
    )
    db.commit()

    return get_event_by_id(event_id)


def delete_event(event_id: int) -> None:
    """
    Delete an event.

    Raises:
        EventNotFound: If event does not exist
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM events WHERE id = ?', (event_id,))
    if cursor.rowcount == 0:
        db.rollback()
        raise EventNotFound(MESSAGES['event_not_found'])
    db.commit()
