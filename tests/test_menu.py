"""
Tests for the restaurant menu catalog.
"""

import pytest


@pytest.fixture
def bebidas(app):
    """ID of the seeded 'Bebidas' category."""
    from models.menu import get_all_categories

    return next(c['id'] for c in get_all_categories() if c['name'] == 'Bebidas')


class TestCategories:
    """Menu categories."""

    def test_seeded(self, app):
        from models.menu import get_all_categories

        names = [c['name'] for c in get_all_categories()]
        assert names == ['Bebidas', 'Desayunos', 'Platos Fuertes', 'Postres']

    def test_create_duplicate(self, app):
        from models.errors import Conflict
        from models.menu import create_category

        assert create_category(' Entradas ')['name'] == 'Entradas'
        with pytest.raises(Conflict):
            create_category('Entradas')

    def test_empty_name(self, app):
        from models.errors import ValidationError
        from models.menu import create_category

        with pytest.raises(ValidationError):
            create_category('   ')

    def test_rename(self, app, bebidas):
        from models.errors import Conflict
        from models.menu import update_category

        assert update_category(bebidas, 'Bebidas y Jugos')['name'] == 'Bebidas y Jugos'
        with pytest.raises(Conflict):
            update_category(bebidas, 'Postres')

    def test_delete_with_items_refused(self, app, bebidas):
        from models.errors import Conflict
        from models.menu import create_menu_item, delete_category, delete_menu_item

        item = create_menu_item('Agua de jamaica', 35, bebidas)
        with pytest.raises(Conflict):
            delete_category(bebidas)

        delete_menu_item(item['id'])
        delete_category(bebidas)

    def test_delete_holds_lock_against_concurrent_item(self, app, bebidas, interleave):
        from models.menu import delete_category, get_category_by_id, get_menu_items

        outcome = interleave(
            'DELETE FROM menu_categories',
            "INSERT INTO menu_items (name, price, category_id) VALUES ('Horchata', 30, ?)",
            (bebidas,)
        )

        delete_category(bebidas)

        assert outcome['result'] == 'database is locked'
        assert get_category_by_id(bebidas) is None
        assert get_menu_items(bebidas) == []

    def test_delete_missing(self, app):
        from models.errors import CategoryNotFound
        from models.menu import delete_category

        with pytest.raises(CategoryNotFound):
            delete_category(999)


class TestItems:
    """Menu items."""

    def test_create(self, app, bebidas):
        from models.menu import create_menu_item, get_all_categories

        item = create_menu_item('Café de olla', '30', bebidas, description='Con canela')

        assert item['price'] == 30
        assert item['category_name'] == 'Bebidas'
        counts = {c['name']: c['item_count'] for c in get_all_categories()}
        assert counts['Bebidas'] == 1

    @pytest.mark.parametrize('name, price', [('', 30), ('Café', None), ('Café', -1), ('Café', 'gratis')])
    def test_invalid(self, app, bebidas, name, price):
        from models.errors import ValidationError
        from models.menu import create_menu_item

        with pytest.raises(ValidationError):
            create_menu_item(name, price, bebidas)

    def test_unknown_category(self, app):
        from models.errors import CategoryNotFound
        from models.menu import create_menu_item

        with pytest.raises(CategoryNotFound):
            create_menu_item('Café', 30, 999)

    def test_filter_by_category(self, app, bebidas):
        from models.menu import create_category, create_menu_item, get_menu_items

        postres = create_category('Dulces')['id']
        create_menu_item('Café', 30, bebidas)
        create_menu_item('Flan', 45, postres)

        assert [i['name'] for i in get_menu_items(category_id=postres)] == ['Flan']
        assert len(get_menu_items()) == 2

    def test_update(self, app, bebidas):
        from models.errors import MenuItemNotFound, ValidationError
        from models.menu import create_menu_item, update_menu_item

        item = create_menu_item('Café', 30, bebidas)

        assert update_menu_item(item['id'], price=35)['price'] == 35
        with pytest.raises(ValidationError):
            update_menu_item(item['id'])
        with pytest.raises(MenuItemNotFound):
            update_menu_item(999, price=1)


class TestMenuRoutes:
    """Reads are public, writes need staff."""

    def test_public_read(self, client, bebidas):
        from models.menu import create_menu_item

        item = create_menu_item('Café', 30, bebidas)

        assert len(client.get('/api/menu/categories').get_json()['data']) == 4
        response = client.get(f'/api/menu/items?category_id={bebidas}')
        assert [i['id'] for i in response.get_json()['data']] == [item['id']]
        assert client.get(f"/api/menu/items/{item['id']}").status_code == 200
        assert client.get('/api/menu/items/999').status_code == 404

    def test_write_requires_login(self, client, bebidas):
        response = client.post('/api/menu/items', json={'name': 'Café', 'price': 30, 'category_id': bebidas})
        assert response.status_code == 401

    def test_staff_writes(self, employee_client, bebidas):
        response = employee_client.post('/api/menu/items', json={
            'name': 'Café', 'price': 30, 'category_id': bebidas
        })
        assert response.status_code == 201
        item_id = response.get_json()['data']['id']

        response = employee_client.put(f'/api/menu/items/{item_id}', json={'price': 32, 'item_id': 5})
        assert response.get_json()['data']['price'] == 32

        response = employee_client.delete(f'/api/menu/categories/{bebidas}')
        assert response.status_code == 409

        assert employee_client.delete(f'/api/menu/items/{item_id}').status_code == 200
        assert employee_client.delete(f'/api/menu/categories/{bebidas}').status_code == 200

    def test_category_routes(self, admin_client):
        response = admin_client.post('/api/menu/categories', json={'name': 'Mariscos'})
        assert response.status_code == 201
        category_id = response.get_json()['data']['id']

        response = admin_client.put(f'/api/menu/categories/{category_id}', json={'name': 'Del Mar'})
        assert response.get_json()['data']['name'] == 'Del Mar'

        response = admin_client.post('/api/menu/categories', json={'name': 'Del Mar'})
        assert response.status_code == 409
