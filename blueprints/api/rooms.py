"""
Room API routes: catalog, availability search and image gallery.
"""

from flask import current_app, request
from flask_login import login_required

from models.errors import RoomNotFound, ValidationError
from models.reservation import get_available_rooms
from models.room import (
    get_all_rooms, get_room_by_id, create_room, update_room, delete_room,
    add_room_images, delete_room_image, reorder_room_images
)
from services.image_storage import save_image, delete_image
from utils.api_response import api_success, require_json
from utils.decorators import role_required
from utils.messages import MESSAGES

ROOM_FIELDS = ('number', 'room_type', 'price', 'description')


def register_routes(bp):
    """Register room API routes on the blueprint."""

    # ============================================================================
    # CATALOG
    # ============================================================================

    @bp.route('/rooms')
    def rooms_list():
        """All rooms ordered by number, with images."""
        return api_success(data=get_all_rooms())

    @bp.route('/rooms/available')
    def rooms_available():
        """
        Rooms free for the whole window.

        Query params:
            start_date: Window start (ISO date or datetime)
            end_date: Window end, exclusive
        """
        start = request.args.get('start_date')
        end = request.args.get('end_date')
        if not start or not end:
            raise ValidationError(MESSAGES['dates_required'])
        return api_success(data=get_available_rooms(start, end))

    @bp.route('/rooms/<int:room_id>')
    def rooms_detail(room_id):
        room = get_room_by_id(room_id)
        if not room:
            raise RoomNotFound(MESSAGES['room_not_found'])
        return api_success(data=room)

    @bp.route('/rooms', methods=['POST'])
    @login_required
    @role_required('admin')
    def rooms_create():
        """Create a room from {number, room_type, price, description?}."""
        data = require_json()
        room_id = create_room(
            data.get('number'),
            data.get('room_type'),
            data.get('price'),
            data.get('description')
        )
        current_app.logger.info('Room %s created (number %s)', room_id, data.get('number'))
        return api_success(data=get_room_by_id(room_id), message=MESSAGES['room_created'], status=201)

    @bp.route('/rooms/<int:room_id>', methods=['PUT'])
    @login_required
    @role_required('admin')
    def rooms_update(room_id):
        data = require_json()
        fields = {k: v for k, v in data.items() if k in ROOM_FIELDS}
        room = update_room(room_id, **fields)
        return api_success(data=room, message=MESSAGES['room_updated'])

    @bp.route('/rooms/<int:room_id>', methods=['DELETE'])
    @login_required
    @role_required('admin')
    def rooms_delete(room_id):
        """Delete a room; refused while it has pending or confirmed reservations."""
        filenames = delete_room(room_id)
        for filename in filenames:
            delete_image(filename)
        current_app.logger.info('Room %s deleted with %s image(s)', room_id, len(filenames))
        return api_success(message=MESSAGES['room_deleted'])

    # ============================================================================
    # IMAGES
    # ============================================================================

    @bp.route('/rooms/<int:room_id>/images', methods=['POST'])
    @login_required
    @role_required('admin')
    def rooms_images_upload(room_id):
        """
        Upload one or more images (multipart field 'images').
        Files already stored are removed if a later one is rejected.
        """
        if not get_room_by_id(room_id):
            raise RoomNotFound(MESSAGES['room_not_found'])

        files = [f for f in request.files.getlist('images') if f and f.filename]
        if not files:
            raise ValidationError(MESSAGES['image_required'])

        stored = []
        try:
            for file in files:
                stored.append(save_image(file, subfolder='rooms'))
            images = add_room_images(room_id, stored)
        except Exception:
            for filename in stored:
                delete_image(filename)
            raise

        return api_success(
            data=images,
            message=MESSAGES['images_uploaded'].format(count=len(stored)),
            status=201
        )

    @bp.route('/rooms/<int:room_id>/images/<int:image_id>', methods=['DELETE'])
    @login_required
    @role_required('admin')
    def rooms_images_delete(room_id, image_id):
        filename = delete_room_image(room_id, image_id)
        delete_image(filename)
        return api_success(message=MESSAGES['image_deleted'])

    @bp.route('/rooms/<int:room_id>/images/order', methods=['PUT'])
    @login_required
    @role_required('admin')
    def rooms_images_reorder(room_id):
        """Body: {image_ids: [...]} listing every image of the room in display order."""
        data = require_json()
        images = reorder_room_images(room_id, data.get('image_ids'))
        return api_success(data=images, message=MESSAGES['images_reordered'])
