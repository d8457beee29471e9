"""
Domain error taxonomy.

Models raise these with Spanish user-facing messages; the application error
handler maps them to JSON responses using ``kind`` and ``status``.
"""


class BookingError(ValueError):
    """Base class for recoverable request-level errors."""

    kind = 'error'
    status = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(BookingError):
    """Missing or malformed required field."""

    kind = 'validation_error'
    status = 400


class InvalidRange(ValidationError):
    """Start date is not strictly before end date."""

    kind = 'invalid_range'


class InvalidStay(ValidationError):
    """Stay shorter than one night."""

    kind = 'invalid_stay'


class InvalidStatusTransition(ValidationError):
    kind = 'invalid_transition'


class NotFound(BookingError):
    kind = 'not_found'
    status = 404


class RoomNotFound(NotFound):
    kind = 'room_not_found'


class ReservationNotFound(NotFound):
    kind = 'reservation_not_found'


class EventNotFound(NotFound):
    kind = 'event_not_found'


class CategoryNotFound(NotFound):
    kind = 'category_not_found'


class MenuItemNotFound(NotFound):
    kind = 'menu_item_not_found'


class UserNotFound(NotFound):
    kind = 'user_not_found'


class Conflict(BookingError):
    """Store-level duplicate key, or a delete blocked by dependent rows."""

    kind = 'conflict'
    status = 409


class DoubleBooking(Conflict):
    """An active reservation already occupies the room for part of the range."""

    kind = 'double_booking'
