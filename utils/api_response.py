"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "Spanish error message", "kind": "..."}
    Warning:  {"success": true, "data": {...}, "warning": "..."}

Usage:
    from utils.api_response import api_success, api_error

    return api_success(data={'id': 1}, message='Creado exitosamente', status=201)
    return api_error('Datos requeridos', status=400, kind='validation_error')
"""

from flask import jsonify
from typing import Any


def api_success(
    data: Any = None,
    message: str | None = None,
    warning: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload (dict or list) to include as 'data' key.
        message: Optional success message (Spanish).
        warning: Optional warning message (Spanish).
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields (e.g. payment_config on
            reservation creation).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if warning:
        response['warning'] = warning

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, kind: str | None = None, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message (Spanish).
        status: HTTP status code (default 400).
        kind: Stable machine-readable error kind (e.g. 'double_booking').
        **extra_fields: Additional top-level fields (e.g., conflicts).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if kind:
        response['kind'] = kind

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_exception(exc) -> tuple:
    """Build an error response from a models.errors.BookingError."""
    return api_error(exc.message, status=exc.status, kind=exc.kind, **exc.details)


def require_json() -> dict:
    """
    Return the request JSON object.

    Raises:
        ValidationError: If the body is missing or not a JSON object
    """
    from flask import request
    from models.errors import ValidationError
    from utils.messages import MESSAGES

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(MESSAGES['json_required'])
    return data
