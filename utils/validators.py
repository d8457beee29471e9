"""
Input validation helper functions.
Provides validation and parsing for common input types.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from models.errors import ValidationError
from utils.messages import MESSAGES

# Storage format for reservation timestamps; sorts lexicographically.
DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """
    Validate a Mexican ten-digit phone number.
    Spaces, dashes and parentheses are ignored.

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    cleaned = re.sub(r'[\s\-\(\)]', '', phone)
    return bool(re.match(r'^[0-9]{10}$', cleaned))


def normalize_phone(phone):
    """Return the digits-only phone, None for empty input. Raises ValidationError."""
    if phone is None or str(phone).strip() == '':
        return None
    phone = str(phone).strip()
    if not validate_phone(phone):
        raise ValidationError(MESSAGES['invalid_phone'].format(value=phone))
    return re.sub(r'[\s\-\(\)]', '', phone)


def validate_password(password: str, min_length: int = 6) -> tuple:
    """
    Validate password strength.

    Args:
        password: Password to validate
        min_length: Minimum password length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not password:
        return False, 'La contraseña es requerida'

    if len(password) < min_length:
        return False, f'La contraseña debe tener al menos {min_length} caracteres'

    return True, ''


def parse_datetime(value) -> datetime:
    """
    Parse an ISO date or datetime into a naive datetime.

    Accepts 'YYYY-MM-DD', 'YYYY-MM-DDTHH:MM[:SS]' and values with a trailing
    'Z' or UTC offset. Aware values are converted to UTC before the tzinfo is
    dropped so that all stored timestamps share one clock.

    Raises:
        ValidationError: If the value is empty or not parseable
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if value is None or str(value).strip() == '':
            raise ValidationError(MESSAGES['dates_required'])
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(MESSAGES['invalid_date'].format(value=value))

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(microsecond=0)


def format_datetime(value: datetime) -> str:
    """Format a datetime in the storage format."""
    # %Y is not zero-padded below year 1000 on every platform
    return f'{value.year:04d}' + value.strftime(DATETIME_FORMAT[2:])


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except (TypeError, ValueError):
        return False


def validate_time_format(time_str: str) -> bool:
    """Validate time is in 24h HH:MM format."""
    if not time_str:
        return False
    return bool(re.match(r'^([01][0-9]|2[0-3]):[0-5][0-9]$', time_str))


def parse_amount(value, message_key: str = 'invalid_price') -> Decimal:
    """
    Parse a non-negative monetary amount.

    Booleans are rejected even though they are ints in Python.

    Raises:
        ValidationError: If the value is not a number or is negative
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(MESSAGES[message_key])
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(MESSAGES[message_key])
    if not amount.is_finite() or amount < 0:
        raise ValidationError(MESSAGES[message_key])
    return amount


def parse_positive_int(value, message_key: str):
    """Parse a strictly positive integer. Raises ValidationError."""
    if isinstance(value, bool):
        raise ValidationError(MESSAGES[message_key])
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(MESSAGES[message_key])
    if isinstance(value, float) and value != number:
        raise ValidationError(MESSAGES[message_key])
    if number <= 0:
        raise ValidationError(MESSAGES[message_key])
    return number


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = str(text).strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
