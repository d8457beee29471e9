"""
User model and data access functions.
Handles user authentication, CRUD operations, and Flask-Login integration.
"""

import sqlite3

from werkzeug.security import generate_password_hash, check_password_hash

from database import get_db
from models.errors import Conflict, UserNotFound, ValidationError
from utils.messages import MESSAGES
from utils.validators import normalize_phone, sanitize_input, validate_password

ROLES = ('admin', 'employee', 'user')

# Columns safe to hand to API clients
_PUBLIC_COLUMNS = 'id, username, role, phone, created_at, updated_at, last_login'


class User:
    """
    User class for Flask-Login integration.
    Wraps database row dictionary with required Flask-Login properties.
    """

    def __init__(self, user_dict):
        """
        Initialize User from database row.

        Args:
            user_dict: Dictionary with user data from database
        """
        self.id = user_dict['id']
        self.username = user_dict['username']
        self.role = user_dict['role']
        self.phone = user_dict.get('phone')
        self.created_at = user_dict.get('created_at')
        self.last_login = user_dict.get('last_login')

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    @property
    def is_admin(self):
        return self.role == 'admin'

    def get_id(self):
        """Required by Flask-Login. Returns user ID as unicode string."""
        return str(self.id)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role,
            'phone': self.phone,
        }


def get_user_by_id(user_id: int) -> dict:
    """
    Get user by ID.

    Args:
        user_id: User ID

    Returns:
        User dict (without password hash) or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(f'SELECT {_PUBLIC_COLUMNS} FROM users WHERE id = ?', (user_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_user_by_username(username: str) -> dict:
    """
    Get user by username, including the password hash.

    Args:
        username: Username to search for

    Returns:
        User dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM users WHERE username = ?', (username,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_all_users() -> list:
    """
    Get all users, newest first.

    Returns:
        List of user dicts
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(f'SELECT {_PUBLIC_COLUMNS} FROM users ORDER BY created_at DESC, id DESC')
    return [dict(row) for row in cursor.fetchall()]


def _parse_role(role) -> str:
    if role not in ROLES:
        raise ValidationError(MESSAGES['invalid_role'].format(value=role))
    return role


def _integrity_conflict(error: sqlite3.IntegrityError) -> Conflict:
    if 'phone' in str(error):
        return Conflict(MESSAGES['phone_exists'])
    return Conflict(MESSAGES['username_exists'])


def create_user(username: str, password: str, role: str = 'user', phone: str = None) -> int:
    """
    Create new user with hashed password.

    Args:
        username: Unique username
        password: Plain text password (will be hashed)
        role: 'admin', 'employee' or 'user'
        phone: Optional unique ten-digit phone

    Returns:
        New user ID

    Raises:
        ValidationError: If a field is missing or invalid
        Conflict: If username or phone already exists
    """
    username = sanitize_input(username, max_length=80)
    if not username:
        raise ValidationError(MESSAGES['username_required'])

    is_valid, error = validate_password(password)
    if not is_valid:
        raise ValidationError(error)

    role = _parse_role(role)
    phone = normalize_phone(phone)

    db = get_db()
    cursor = db.cursor()
    try:
        cursor.execute('''
            INSERT INTO users (username, password_hash, role, phone)
            VALUES (?, ?, ?, ?)
        ''', (username, generate_password_hash(password), role, phone))
    except sqlite3.IntegrityError as e:
        db.rollback()
        raise _integrity_conflict(e)

    db.commit()
    return cursor.lastrowid


def update_user(user_id: int, **kwargs) -> dict:
    """
    Update user fields.

    Args:
        user_id: User ID to update
        **kwargs: Fields to update (username, role, phone, password)

    Returns:
        Updated user dict

    Raises:
        UserNotFound: If user does not exist
        ValidationError: If no field is given or a value is invalid
        Conflict: If the new username or phone is taken
    """
    updates = {}

    if 'username' in kwargs:
        username = sanitize_input(kwargs['username'], max_length=80)
        if not username:
            raise ValidationError(MESSAGES['username_required'])
        updates['username'] = username

    if 'role' in kwargs:
        updates['role'] = _parse_role(kwargs['role'])

    if 'phone' in kwargs:
        updates['phone'] = normalize_phone(kwargs['phone'])

    if kwargs.get('password'):
        is_valid, error = validate_password(kwargs['password'])
        if not is_valid:
            raise ValidationError(error)
        updates['password_hash'] = generate_password_hash(kwargs['password'])

    if not updates:
        raise ValidationError(MESSAGES['no_fields_to_update'])

    if not get_user_by_id(user_id):
        raise UserNotFound(MESSAGES['user_not_found'])

    set_clause = ', '.join(f'{field} = ?' for field in updates)

    db = get_db()
    try:
        db.execute(
            f'UPDATE users SET {set_clause}, updated_at = CURRENT_TIMESTAMP WHERE id = ?',
            [*updates.values(), user_id]
        )
    except sqlite3.IntegrityError as e:
        db.rollback()
        raise _integrity_conflict(e)
    db.commit()

    return get_user_by_id(user_id)


def delete_user(user_id: int) -> None:
    """
    Delete a user. Their reservations are kept with user_id set to NULL.

    Raises:
        UserNotFound: If user does not exist
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM users WHERE id = ?', (user_id,))
    if cursor.rowcount == 0:
        db.rollback()
        raise UserNotFound(MESSAGES['user_not_found'])
    db.commit()


def update_last_login(user_id: int) -> None:
    """
    Update last login timestamp.

    Args:
        user_id: User ID
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        UPDATE users SET last_login = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (user_id,))
    db.commit()


def check_password(user_dict: dict, password: str) -> bool:
    """
    Verify password against stored hash.

    Args:
        user_dict: User dictionary with password_hash
        password: Plain text password to check

    Returns:
        True if password matches
    """
    return check_password_hash(user_dict['password_hash'], password)
