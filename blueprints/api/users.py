"""
User administration API routes. Admin only.
"""

from flask import current_app
from flask_login import login_required, current_user

from models.errors import UserNotFound, ValidationError
from models.user import get_all_users, get_user_by_id, create_user, update_user, delete_user
from utils.api_response import api_success, require_json
from utils.decorators import role_required
from utils.messages import MESSAGES

USER_UPDATE_FIELDS = ('username', 'role', 'phone', 'password')


def register_routes(bp):
    """Register user API routes on the blueprint."""

    @bp.route('/users')
    @login_required
    @role_required('admin')
    def users_list():
        return api_success(data=get_all_users())

    @bp.route('/users/<int:user_id>')
    @login_required
    @role_required('admin')
    def users_detail(user_id):
        user = get_user_by_id(user_id)
        if not user:
            raise UserNotFound(MESSAGES['user_not_found'])
        return api_success(data=user)

    @bp.route('/users', methods=['POST'])
    @login_required
    @role_required('admin')
    def users_create():
        """Create a user from {username, password, role?, phone?}."""
        data = require_json()
        user_id = create_user(
            username=data.get('username'),
            password=data.get('password'),
            role=data.get('role') or 'user',
            phone=data.get('phone')
        )
        current_app.logger.info('User %s created by %s', user_id, current_user.username)
        return api_success(data=get_user_by_id(user_id), message=MESSAGES['user_created'], status=201)

    @bp.route('/users/<int:user_id>', methods=['PUT'])
    @login_required
    @role_required('admin')
    def users_update(user_id):
        fields = {k: v for k, v in require_json().items() if k in USER_UPDATE_FIELDS}
        user = update_user(user_id, **fields)
        return api_success(data=user, message=MESSAGES['user_updated'])

    @bp.route('/users/<int:user_id>', methods=['DELETE'])
    @login_required
    @role_required('admin')
    def users_delete(user_id):
        if user_id == current_user.id:
            raise ValidationError(MESSAGES['cannot_delete_self'])
        delete_user(user_id)
        current_app.logger.info('User %s deleted by %s', user_id, current_user.username)
        return api_success(message=MESSAGES['user_deleted'])
