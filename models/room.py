"""
Room model and data access functions.
Handles room CRUD and the ordered image gallery of each room.
"""

import sqlite3

from database import get_db
from models.errors import Conflict, NotFound, RoomNotFound, ValidationError
from utils.messages import MESSAGES
from utils.validators import parse_amount, parse_positive_int, sanitize_input
from .reservation_state import ACTIVE_STATUSES


# =============================================================================
# IMAGES
# =============================================================================

def _image_dict(row) -> dict:
    image = dict(row)
    image['url'] = f"/uploads/{image['filename']}"
    return image


def get_room_images(room_id: int) -> list:
    """
    Get a room's images in display order.

    Args:
        room_id: Room ID

    Returns:
        List of image dicts (id, filename, position, url)
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT id, room_id, filename, position FROM room_images
        WHERE room_id = ?
        ORDER BY position, id
    ''', (room_id,))
    return [_image_dict(row) for row in cursor.fetchall()]


def attach_images(rooms: list) -> list:
    """Add an 'images' list to each room dict with a single query."""
    if not rooms:
        return rooms

    ids = [room['id'] for room in rooms]
    placeholders = ','.join('?' * len(ids))

    db = get_db()
    cursor = db.cursor()
    cursor.execute(f'''
        SELECT id, room_id, filename, position FROM room_images
        WHERE room_id IN ({placeholders})
        ORDER BY position, id
    ''', ids)

    by_room = {room_id: [] for room_id in ids}
    for row in cursor.fetchall():
        by_room[row['room_id']].append(_image_dict(row))

    for room in rooms:
        room['images'] = by_room[room['id']]
    return rooms


def add_room_images(room_id: int, filenames: list) -> list:
    """
    Append stored images to the end of a room's gallery.

    Args:
        room_id: Room ID
        filenames: Stored filenames (relative to the upload folder)

    Returns:
        The room's full image list

    Raises:
        RoomNotFound: If room does not exist
    """
    db = get_db()
    cursor = db.cursor()

    if not _room_exists(cursor, room_id):
        raise RoomNotFound(MESSAGES['room_not_found'])

    cursor.execute('SELECT COALESCE(MAX(position), -1) AS max_pos FROM room_images WHERE room_id = ?',
                   (room_id,))
    position = cursor.fetchone()['max_pos'] + 1

    for filename in filenames:
        cursor.execute('''
            INSERT INTO room_images (room_id, filename, position)
            VALUES (?, ?, ?)
        ''', (room_id, filename, position))
        position += 1

    db.commit()
    return get_room_images(room_id)


def delete_room_image(room_id: int, image_id: int) -> str:
    """
    Remove an image from a room's gallery.

    Returns:
        str: Stored filename of the removed image (caller deletes the file)

    Raises:
        NotFound: If the image does not belong to the room
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT filename FROM room_images WHERE id = ? AND room_id = ?',
                   (image_id, room_id))
    row = cursor.fetchone()
    if not row:
        raise NotFound(MESSAGES['image_not_found'])

    cursor.execute('DELETE FROM room_images WHERE id = ?', (image_id,))
    db.commit()
    return row['filename']


def reorder_room_images(room_id: int, image_ids: list) -> list:
    """
    Set the display order of a room's images.

    Args:
        room_id: Room ID
        image_ids: Every image ID of the room, in the new order

    Returns:
        The reordered image list

    Raises:
        RoomNotFound: If room does not exist
        ValidationError: If image_ids is not a permutation of the room's images
    """
    db = get_db()
    cursor = db.cursor()

    if not _room_exists(cursor, room_id):
        raise RoomNotFound(MESSAGES['room_not_found'])

    cursor.execute('SELECT id FROM room_images WHERE room_id = ?', (room_id,))
    current_ids = {row['id'] for row in cursor.fetchall()}

    if not isinstance(image_ids, list) or len(image_ids) != len(current_ids) \
            or set(image_ids) != current_ids:
        raise ValidationError(MESSAGES['invalid_image_order'])

    for position, image_id in enumerate(image_ids):
        cursor.execute('UPDATE room_images SET position = ? WHERE id = ?', (position, image_id))

    db.commit()
    return get_room_images(room_id)


# =============================================================================
# READ
# =============================================================================

def _room_exists(cursor, room_id: int) -> bool:
    cursor.execute('SELECT 1 FROM rooms WHERE id = ?', (room_id,))
    return cursor.fetchone() is not None


def get_all_rooms() -> list:
    """
    Get all rooms ordered by number, with images.

    Returns:
        List of room dicts
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM rooms ORDER BY number')
    return attach_images([dict(row) for row in cursor.fetchall()])


def get_room_by_id(room_id: int) -> dict:
    """
    Get room by ID.

    Args:
        room_id: Room ID

    Returns:
        Room dict with images or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM rooms WHERE id = ?', (room_id,))
    row = cursor.fetchone()
    if not row:
        return None
    return attach_images([dict(row)])[0]


# =============================================================================
# CREATE / UPDATE
# =============================================================================

def _clean_room_fields(number=None, room_type=None, price=None, description=None) -> dict:
    fields = {}
    if number is not None:
        fields['number'] = parse_positive_int(number, 'invalid_room_number')
    if room_type is not None:
        room_type = sanitize_input(room_type, max_length=100)
        if not room_type:
            raise ValidationError(MESSAGES['room_required_fields'])
        fields['room_type'] = room_type
    if price is not None:
        fields['price'] = float(parse_amount(price, 'invalid_price'))
    if description is not None:
        fields['description'] = sanitize_input(description, max_length=2000)
    return fields


def create_room(number, room_type, price, description: str = None) -> int:
    """
    Create a new room.

    Args:
        number: Room number (positive integer, unique)
        room_type: Room type label
        price: Nightly rate (non-negative)
        description: Optional description

    Returns:
        New room ID

    Raises:
        ValidationError: If required fields are missing or invalid
        Conflict: If the room number already exists
    """
    if number is None or not room_type or price is None:
        raise ValidationError(MESSAGES['room_required_fields'])

    fields = _clean_room_fields(number, room_type, price, description)

    db = get_db()
    cursor = db.cursor()
    try:
        cursor.execute('''
            INSERT INTO rooms (number, room_type, price, description)
            VALUES (?, ?, ?, ?)
        ''', (fields['number'], fields['room_type'], fields['price'], fields.get('description')))
        db.commit()
    except sqlite3.IntegrityError:
        db.rollback()
        raise Conflict(MESSAGES['room_number_exists'].format(number=fields['number']))

    return cursor.lastrowid


def update_room(room_id: int, **kwargs) -> dict:
    """
    Update room fields.

    Args:
        room_id: Room ID
        **kwargs: Fields to update (number, room_type, price, description)

    Returns:
        Updated room dict

    Raises:
        ValidationError: If no field is given or a value is invalid
        RoomNotFound: If room does not exist
        Conflict: If the new number belongs to another room
    """
    allowed = ('number', 'room_type', 'price', 'description')
    fields = _clean_room_fields(**{k: v for k, v in kwargs.items() if k in allowed})
    if not fields:
        raise ValidationError(MESSAGES['no_fields_to_update'])

    db = get_db()
    cursor = db.cursor()

    if not _room_exists(cursor, room_id):
        raise RoomNotFound(MESSAGES['room_not_found'])

    set_clause = ', '.join(f'{column} = ?' for column in fields)
    try:
        cursor.execute(
            f'UPDATE rooms SET {set_clause}, updated_at = CURRENT_TIMESTAMP WHERE id = ?',
            [*fields.values(), room_id]
        )
        db.commit()
    except sqlite3.IntegrityError:
        db.rollback()
        raise Conflict(MESSAGES['room_number_exists'].format(number=fields.get('number')))

    return get_room_by_id(room_id)


# =============================================================================
# DELETE
# =============================================================================

def delete_room(room_id: int) -> list:
    """
    Delete a room with its image records and inactive reservations.

    Args:
        room_id: Room ID

    Returns:
        list: Stored image filenames to remove from storage

    Raises:
        RoomNotFound: If room does not exist
        Conflict: If the room still has active reservations
    """
    db = get_db()
    cursor = db.cursor()

    try:
        # Hold the write lock so no booking lands between the check and the delete
        cursor.execute('BEGIN IMMEDIATE')

        if not _room_exists(cursor, room_id):
            raise RoomNotFound(MESSAGES['room_not_found'])

        placeholders = ','.join('?' * len(ACTIVE_STATUSES))
        cursor.execute(f'''
            SELECT COUNT(*) AS active_count FROM reservations
            WHERE room_id = ? AND status IN ({placeholders})
        ''', (room_id, *ACTIVE_STATUSES))
        if cursor.fetchone()['active_count'] > 0:
            raise Conflict(MESSAGES['room_has_reservations'])

        cursor.execute('SELECT filename FROM room_images WHERE room_id = ?', (room_id,))
        filenames = [row['filename'] for row in cursor.fetchall()]

        # reservations.room_id is ON DELETE RESTRICT; only cancelled rows remain here
        cursor.execute('DELETE FROM reservations WHERE room_id = ?', (room_id,))
        cursor.execute('DELETE FROM rooms WHERE id = ?', (room_id,))

        db.commit()

    except sqlite3.IntegrityError:
        db.rollback()
        raise Conflict(MESSAGES['room_has_reservations'])
    except Exception:
        db.rollback()
        raise

    return filenames
