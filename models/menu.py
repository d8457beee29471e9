"""
Menu catalog data access functions.
Handles restaurant categories and the dishes filed under them.
"""

import sqlite3

from database import get_db
from models.errors import CategoryNotFound, Conflict, MenuItemNotFound, ValidationError
from utils.messages import MESSAGES
from utils.validators import parse_amount, sanitize_input


# =============================================================================
# CATEGORIES
# =============================================================================

def get_all_categories() -> list:
    """
    Get all menu categories with their item count.

    Returns:
        List of category dicts ordered by name
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT c.id, c.name, COUNT(i.id) AS item_count
        FROM menu_categories c
        LEFT JOIN menu_items i ON i.category_id = c.id
        GROUP BY c.id
        ORDER BY c.name
    ''')
    return [dict(row) for row in cursor.fetchall()]


def get_category_by_id(category_id: int) -> dict:
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT id, name FROM menu_categories WHERE id = ?', (category_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def _clean_category_name(name) -> str:
    name = sanitize_input(name, max_length=80)
    if not name:
        raise ValidationError(MESSAGES['category_name_required'])
    return name


def create_category(name: str) -> dict:
    """
    Create a menu category.

    Raises:
        ValidationError: If name is empty
        Conflict: If a category with that name exists
    """
    name = _clean_category_name(name)

    db = get_db()
    cursor = db.cursor()
    try:
        cursor.execute('INSERT INTO menu_categories (name) VALUES (?)', (name,))
    except sqlite3.IntegrityError:
        db.rollback()
        raise Conflict(MESSAGES['category_exists'].format(name=name))
    db.commit()

    return get_category_by_id(cursor.lastrowid)


def update_category(category_id: int, name: str) -> dict:
    """
    Rename a menu category.

    Raises:
        CategoryNotFound: If category does not exist
        Conflict: If the new name is taken
    """
    name = _clean_category_name(name)

    if not get_category_by_id(category_id):
        raise CategoryNotFound(MESSAGES['category_not_found'])

    db = get_db()
    try:
        db.execute('UPDATE menu_categories SET name = ? WHERE id = ?', (name, category_id))
    except sqlite3.IntegrityError:
        db.rollback()
        raise Conflict(MESSAGES['category_exists'].format(name=name))
    db.commit()

    return get_category_by_id(category_id)


def delete_category(category_id: int) -> None:
    """
    Delete an empty menu category.

    Raises:
        CategoryNotFound: If category does not exist
        Conflict: If the category still has items
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('SELECT 1 FROM menu_categories WHERE id = ?', (category_id,))
        if not cursor.fetchone():
            raise CategoryNotFound(MESSAGES['category_not_found'])

        cursor.execute('SELECT COUNT(*) FROM menu_items WHERE category_id = ?', (category_id,))
        if cursor.fetchone()[0] > 0:
            raise Conflict(MESSAGES['category_has_items'])

        cursor.execute('DELETE FROM menu_categories WHERE id = ?', (category_id,))
        db.commit()

    except sqlite3.IntegrityError:
        db.rollback()
        raise Conflict(MESSAGES['category_has_items'])
    except Exception:
        db.rollback()
        raise


# =============================================================================
# ITEMS
# =============================================================================

_ITEM_SELECT = '''
    SELECT i.id, i.name, i.description, i.price, i.category_id,
           c.name AS category_name, i.created_at, i.updated_at
    FROM menu_items i
    JOIN menu_categories c ON i.category_id = c.id
'''


def get_menu_items(category_id: int = None) -> list:
    """
    Get menu items, optionally filtered by category.

    Args:
        category_id: Category filter (optional)

    Returns:
        List of item dicts with category_name
    """
    query = _ITEM_SELECT
    params = []
    if category_id:
        query += ' WHERE i.category_id = ?'
        params.append(category_id)
    query += ' ORDER BY c.name, i.name'

    db = get_db()
    cursor = db.cursor()
    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_menu_item_by_id(item_id: int) -> dict:
    db = get_db()
    cursor = db.cursor()
    cursor.execute(_ITEM_SELECT + ' WHERE i.id = ?', (item_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def _clean_item_fields(data: dict) -> dict:
    fields = {}

    if 'name' in data:
        name = sanitize_input(data['name'], max_length=120)
        if not name:
            raise ValidationError(MESSAGES['menu_item_required_fields'])
        fields['name'] = name

    if 'description' in data:
        fields['description'] = sanitize_input(data['description'], max_length=500) or None

    if 'price' in data:
        fields['price'] = float(parse_amount(data['price']))

    if 'category_id' in data:
        try:
            category_id = int(data['category_id'])
        except (TypeError, ValueError):
            raise CategoryNotFound(MESSAGES['category_not_found'])
        if not get_category_by_id(category_id):
            raise CategoryNotFound(MESSAGES['category_not_found'])
        fields['category_id'] = category_id

    return fields


def create_menu_item(name, price, category_id, description: str = None) -> dict:
    """
    Create a menu item.

    Raises:
        ValidationError: If name or price is missing or invalid
        CategoryNotFound: If the category does not exist
    """
    if not name or price is None or category_id is None:
        raise ValidationError(MESSAGES['menu_item_required_fields'])

    fields = _clean_item_fields({
        'name': name, 'price': price, 'category_id': category_id,
        'description': description
    })

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO menu_items (name, description, price, category_id)
        VALUES (?, ?, ?, ?)
    ''', (fields['name'], fields['description'], fields['price'], fields['category_id']))
    db.commit()

    return get_menu_item_by_id(cursor.lastrowid)


def update_menu_item(item_id: int, **kwargs) -> dict:
    """
    Update a menu item.

    Args:
        item_id: Item ID
        **kwargs: name, description, price, category_id

    Raises:
        MenuItemNotFound: If the item does not exist
        ValidationError: If no field is given or a value is invalid
    """
    data = {k: v for k, v in kwargs.items() if k in ('name', 'description', 'price', 'category_id')}
    if not data:
        raise ValidationError(MESSAGES['no_fields_to_update'])

    if not get_menu_item_by_id(item_id):
        raise MenuItemNotFound(MESSAGES['menu_item_not_found'])

    fields = _clean_item_fields(data)
    set_clause = ', '.join(f'{column} = ?' for column in fields)

    db = get_db()
    db.execute(
        f'UPDATE menu_items SET {set_clause}, updated_at = CURRENT_TIMESTAMP WHERE id = ?',
        [*fields.values(), item_id]
    )
    db.commit()

    return get_menu_item_by_id(item_id)


def delete_menu_item(item_id: int) -> None:
    """
    Delete a menu item.

    Raises:
        MenuItemNotFound: If the item does not exist
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM menu_items WHERE id = ?', (item_id,))
    if cursor.rowcount == 0:
        db.rollback()
        raise MenuItemNotFound(MESSAGES['menu_item_not_found'])
    db.commit()
