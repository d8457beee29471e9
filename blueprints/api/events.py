"""
Social-area event API routes.
"""

from flask import make_response
from flask_login import login_required

from models.errors import EventNotFound
from models.event import get_all_events, get_event_by_id, create_event, update_event, delete_event
from services.contracts import render_event_contract
from utils.api_response import api_success, require_json
from utils.decorators import role_required, STAFF_ROLES
from utils.messages import MESSAGES


def register_routes(bp):
    """Register event API routes on the blueprint."""

    @bp.route('/events')
    @login_required
    @role_required(*STAFF_ROLES)
    def events_list():
        return api_success(data=get_all_events())

    @bp.route('/events/<int:event_id>')
    @login_required
    @role_required(*STAFF_ROLES)
    def events_detail(event_id):
        event = get_event_by_id(event_id)
        if not event:
            raise EventNotFound(MESSAGES['event_not_found'])
        return api_success(data=event)

    @bp.route('/events', methods=['POST'])
    @login_required
    @role_required(*STAFF_ROLES)
    def events_create():
        """
        Register a social-area rental.

        Request body:
            client_name, event_date (YYYY-MM-DD), amount (required);
            client_phone, start_time, end_time (HH:MM), usage_description,
            attendee_limit, rented_area, status (optional)
        """
        event = create_event(require_json())
        return api_success(data=event, message=MESSAGES['event_created'], status=201)

    @bp.route('/events/<int:event_id>', methods=['PUT'])
    @login_required
    @role_required(*STAFF_ROLES)
    def events_update(event_id):
        event = update_event(event_id, require_json())
        return api_success(data=event, message=MESSAGES['event_updated'])

    @bp.route('/events/<int:event_id>', methods=['DELETE'])
    @login_required
    @role_required(*STAFF_ROLES)
    def events_delete(event_id):
        delete_event(event_id)
        return api_success(message=MESSAGES['event_deleted'])

    @bp.route('/events/<int:event_id>/contract')
    @login_required
    @role_required(*STAFF_ROLES)
    def events_contract(event_id):
        """Social-area rental contract as an inline PDF."""
        event = get_event_by_id(event_id)
        if not event:
            raise EventNotFound(MESSAGES['event_not_found'])

        response = make_response(render_event_contract(event))
        response.headers['Content-Type'] = 'application/pdf'
        response.headers['Content-Disposition'] = f'inline; filename=contrato-evento-{event_id}.pdf'
        return response
