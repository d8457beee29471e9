"""
Restaurant menu API routes: categories and items.
Reads are public; changes require staff.
"""

from flask import request
from flask_login import login_required

from models.errors import MenuItemNotFound
from models.menu import (
    get_all_categories, create_category, update_category, delete_category,
    get_menu_items, get_menu_item_by_id, create_menu_item, update_menu_item,
    delete_menu_item
)
from utils.api_response import api_success, require_json
from utils.decorators import role_required, STAFF_ROLES
from utils.messages import MESSAGES

MENU_ITEM_FIELDS = ('name', 'description', 'price', 'category_id')


def register_routes(bp):
    """Register menu API routes on the blueprint."""

    # ============================================================================
    # CATEGORIES
    # ============================================================================

    @bp.route('/menu/categories')
    def menu_categories_list():
        return api_success(data=get_all_categories())

    @bp.route('/menu/categories', methods=['POST'])
    @login_required
    @role_required(*STAFF_ROLES)
    def menu_categories_create():
        category = create_category(require_json().get('name'))
        return api_success(data=category, message=MESSAGES['category_created'], status=201)

    @bp.route('/menu/categories/<int:category_id>', methods=['PUT'])
    @login_required
    @role_required(*STAFF_ROLES)
    def menu_categories_update(category_id):
        category = update_category(category_id, require_json().get('name'))
        return api_success(data=category, message=MESSAGES['category_updated'])

    @bp.route('/menu/categories/<int:category_id>', methods=['DELETE'])
    @login_required
    @role_required(*STAFF_ROLES)
    def menu_categories_delete(category_id):
        delete_category(category_id)
        return api_success(message=MESSAGES['category_deleted'])

    # ============================================================================
    # ITEMS
    # ============================================================================

    @bp.route('/menu/items')
    def menu_items_list():
        """Menu items, optionally filtered with ?category_id=."""
        items = get_menu_items(category_id=request.args.get('category_id', type=int))
        return api_success(data=items)

    @bp.route('/menu/items/<int:item_id>')
    def menu_items_detail(item_id):
        item = get_menu_item_by_id(item_id)
        if not item:
            raise MenuItemNotFound(MESSAGES['menu_item_not_found'])
        return api_success(data=item)

    @bp.route('/menu/items', methods=['POST'])
    @login_required
    @role_required(*STAFF_ROLES)
    def menu_items_create():
        data = require_json()
        item = create_menu_item(
            data.get('name'),
            data.get('price'),
            data.get('category_id'),
            description=data.get('description')
        )
        return api_success(data=item, message=MESSAGES['menu_item_created'], status=201)

    @bp.route('/menu/items/<int:item_id>', methods=['PUT'])
    @login_required
    @role_required(*STAFF_ROLES)
    def menu_items_update(item_id):
        fields = {k: v for k, v in require_json().items() if k in MENU_ITEM_FIELDS}
        item = update_menu_item(item_id, **fields)
        return api_success(data=item, message=MESSAGES['menu_item_updated'])

    @bp.route('/menu/items/<int:item_id>', methods=['DELETE'])
    @login_required
    @role_required(*STAFF_ROLES)
    def menu_items_delete(item_id):
        delete_menu_item(item_id)
        return api_success(message=MESSAGES['menu_item_deleted'])
