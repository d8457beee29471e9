"""Timezone-aware date/time helpers for the hotel application."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from flask import current_app


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'America/Mexico_City')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_period_window(period: str, today: date = None) -> tuple:
    """
    Get the [start, end) window for a listing period.

    Weeks run Monday to Sunday.

    Args:
        period: 'week', 'month' or 'year'
        today: Reference date (default: today in the configured timezone)

    Returns:
        Tuple of (start_date, end_date) as dates, end exclusive,
        or None for an unknown period
    """
    today = today or get_today()

    if period == 'week':
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=7)
    if period == 'month':
        start = today.replace(day=1)
        if start.month == 12:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return start, end
    if period == 'year':
        start = today.replace(month=1, day=1)
        return start, start.replace(year=start.year + 1)
    return None


def format_long_date(value) -> str:
    """Format a date as '5 de junio de 2024' for contracts and emails."""
    months = [
        'enero', 'febrero', 'marzo', 'abril', 'mayo', 'junio', 'julio',
        'agosto', 'septiembre', 'octubre', 'noviembre', 'diciembre'
    ]
    if not value:
        return ''
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f'{value.day} de {months[value.month - 1]} de {value.year}'
