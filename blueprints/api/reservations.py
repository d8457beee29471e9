"""
Reservation API routes: booking, availability quote, lifecycle and contract.
"""

from flask import current_app, request, make_response
from flask_login import login_required, current_user

from models.errors import ReservationNotFound, ValidationError
from models.payment_config import get_payment_config
from models.reservation import (
    create_reservation, update_reservation, delete_reservation,
    get_reservations, get_reservation_with_details, quote_stay
)
from services.contracts import render_reservation_contract
from utils.api_response import api_success, require_json
from utils.decorators import role_required, STAFF_ROLES
from utils.messages import MESSAGES


def _booking_user_id(data):
    """Staff may book for any user; a logged-in guest books for themselves."""
    if not current_user.is_authenticated:
        return None
    if current_user.role in STAFF_ROLES:
        return data.get('user_id')
    return current_user.id


def register_routes(bp):
    """Register reservation API routes on the blueprint."""

    @bp.route('/reservations')
    @login_required
    @role_required(*STAFF_ROLES)
    def reservations_list():
        """
        List reservations.

        Query params:
            period: 'week', 'month' or 'year' (optional)
            room_id: Room filter (optional)
            status: Status filter (optional)
        """
        reservations = get_reservations(
            period=request.args.get('period'),
            room_id=request.args.get('room_id', type=int),
            status=request.args.get('status') or None
        )
        return api_success(data=reservations)

    @bp.route('/reservations/<int:reservation_id>')
    @login_required
    @role_required(*STAFF_ROLES)
    def reservations_detail(reservation_id):
        reservation = get_reservation_with_details(reservation_id)
        if not reservation:
            raise ReservationNotFound(MESSAGES['reservation_not_found'])
        return api_success(data=reservation)

    @bp.route('/reservations', methods=['POST'])
    def reservations_create():
        """
        Book a room. Open to the public.

        Request body:
            room_id, start_date, end_date, payment_method ('cash'|'transfer'),
            guest_name, guest_email, guest_phone (optional)

        Returns:
            The pending reservation plus the payment configuration the guest
            needs for a transfer
        """
        data = require_json()
        reservation = create_reservation(
            room_id=data.get('room_id'),
            start_date=data.get('start_date'),
            end_date=data.get('end_date'),
            payment_method=data.get('payment_method'),
            user_id=_booking_user_id(data),
            guest_name=data.get('guest_name'),
            guest_email=data.get('guest_email'),
            guest_phone=data.get('guest_phone'),
        )
        return api_success(
            data=reservation,
            message=MESSAGES['reservation_created'],
            status=201,
            payment_config=get_payment_config()
        )

    @bp.route('/reservations/check', methods=['POST'])
    def reservations_check():
        """
        Availability and price quote without booking.

        Request body:
            room_id, start_date, end_date, exclude_reservation_id (optional)
        """
        data = require_json()
        if not data.get('room_id'):
            raise ValidationError(MESSAGES['reservation_required_fields'])
        quote = quote_stay(
            data.get('room_id'),
            data.get('start_date'),
            data.get('end_date'),
            exclude_reservation_id=data.get('exclude_reservation_id')
        )
        return api_success(data=quote)

    @bp.route('/reservations/<int:reservation_id>', methods=['PUT'])
    @login_required
    @role_required(*STAFF_ROLES)
    def reservations_update(reservation_id):
        """Change dates, room, status, payment method or guest fields."""
        data = require_json()
        reservation = update_reservation(reservation_id, data)
        return api_success(data=reservation, message=MESSAGES['reservation_updated'])

    @bp.route('/reservations/<int:reservation_id>', methods=['DELETE'])
    @login_required
    @role_required(*STAFF_ROLES)
    def reservations_delete(reservation_id):
        delete_reservation(reservation_id)
        return api_success(message=MESSAGES['reservation_deleted'])

    @bp.route('/reservations/<int:reservation_id>/contract')
    @login_required
    @role_required(*STAFF_ROLES)
    def reservations_contract(reservation_id):
        """Lodging contract as an inline PDF."""
        reservation = get_reservation_with_details(reservation_id)
        if not reservation:
            raise ReservationNotFound(MESSAGES['reservation_not_found'])

        pdf = render_reservation_contract(reservation)
        current_app.logger.info('Contract generated for reservation %s', reservation_id)

        response = make_response(pdf)
        response.headers['Content-Type'] = 'application/pdf'
        response.headers['Content-Disposition'] = f'inline; filename=contrato-reserva-{reservation_id}.pdf'
        return response
