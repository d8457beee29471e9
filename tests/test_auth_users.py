"""
Tests for session authentication and user administration.
"""

import pytest


class TestLogin:
    """Login, logout and current user."""

    def test_login_success(self, client):
        response = client.post('/api/auth/login', json={'username': 'admin', 'password': 'admin123'})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['username'] == 'admin'
        assert data['role'] == 'admin'
        assert 'password_hash' not in data

    def test_login_records_last_login(self, client):
        from models.user import get_user_by_username

        client.post('/api/auth/login', json={'username': 'admin', 'password': 'admin123'})
        assert get_user_by_username('admin')['last_login'] is not None

    def test_wrong_password(self, client):
        response = client.post('/api/auth/login', json={'username': 'admin', 'password': 'nope'})
        assert response.status_code == 401
        assert response.get_json()['kind'] == 'invalid_credentials'

    def test_unknown_user(self, client):
        response = client.post('/api/auth/login', json={'username': 'nadie', 'password': 'admin123'})
        assert response.status_code == 401

    def test_missing_fields(self, client):
        response = client.post('/api/auth/login', json={'username': 'admin'})
        assert response.status_code == 400
        assert 'password' in response.get_json()['fields']

    def test_me_requires_login(self, client):
        response = client.get('/api/auth/me')
        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_me_and_logout(self, admin_client):
        assert admin_client.get('/api/auth/me').get_json()['data']['username'] == 'admin'

        assert admin_client.post('/api/auth/logout').status_code == 200
        assert admin_client.get('/api/auth/me').status_code == 401

    def test_csrf_token(self, client):
        response = client.get('/api/auth/csrf-token')
        assert response.get_json()['data']['csrf_token']


class TestUserModel:
    """User data access."""

    def test_create_hashes_password(self, app):
        from models.user import create_user, get_user_by_username, check_password

        create_user('maria', 'secreto1', phone='951 440 1726')
        user = get_user_by_username('maria')

        assert user['password_hash'] != 'secreto1'
        assert check_password(user, 'secreto1')
        assert user['phone'] == '9514401726'
        assert user['role'] == 'user'

    def test_duplicates(self, app):
        from models.errors import Conflict
        from models.user import create_user

        create_user('maria', 'secreto1', phone='9514401726')
        with pytest.raises(Conflict) as username_error:
            create_user('maria', 'secreto2')
        with pytest.raises(Conflict) as phone_error:
            create_user('eva', 'secreto2', phone='9514401726')

        assert username_error.value.message != phone_error.value.message

    @pytest.mark.parametrize('username, password, role', [
        ('', 'secreto1', 'user'),
        ('maria', '123', 'user'),
        ('maria', 'secreto1', 'root'),
    ])
    def test_invalid(self, app, username, password, role):
        from models.errors import ValidationError
        from models.user import create_user

        with pytest.raises(ValidationError):
            create_user(username, password, role=role)

    def test_update_password(self, app):
        from models.user import create_user, update_user, get_user_by_username, check_password

        user_id = create_user('maria', 'secreto1')
        update_user(user_id, password='nuevo123', role='employee')

        user = get_user_by_username('maria')
        assert check_password(user, 'nuevo123')
        assert user['role'] == 'employee'

    def test_delete_keeps_reservations(self, app, rooms):
        from models.reservation import create_reservation, get_reservation_by_id
        from models.user import create_user, delete_user

        user_id = create_user('maria', 'secreto1')
        reservation = create_reservation(rooms[101], '2025-06-01', '2025-06-03', 'cash', user_id=user_id)

        delete_user(user_id)

        assert get_reservation_by_id(reservation['id'])['user_id'] is None


class TestUserRoutes:
    """User administration is admin only."""

    def test_employee_forbidden(self, employee_client):
        assert employee_client.get('/api/users').status_code == 403

    def test_crud(self, admin_client):
        response = admin_client.post('/api/users', json={
            'username': 'recepcion', 'password': 'secreto1', 'role': 'employee'
        })
        assert response.status_code == 201
        user_id = response.get_json()['data']['id']

        usernames = [u['username'] for u in admin_client.get('/api/users').get_json()['data']]
        assert set(usernames) == {'admin', 'recepcion'}

        response = admin_client.put(f'/api/users/{user_id}', json={'phone': '9511234567', 'id': 1})
        assert response.get_json()['data']['phone'] == '9511234567'

        assert admin_client.delete(f'/api/users/{user_id}').status_code == 200
        assert admin_client.get(f'/api/users/{user_id}').status_code == 404

    def test_duplicate_username(self, admin_client):
        response = admin_client.post('/api/users', json={'username': 'admin', 'password': 'secreto1'})
        assert response.status_code == 409

    def test_cannot_delete_self(self, admin_client):
        me = admin_client.get('/api/auth/me').get_json()['data']

        response = admin_client.delete(f"/api/users/{me['id']}")
        assert response.status_code == 400


class TestCreateAdminCommand:
    """flask create-admin."""

    def test_creates_admin(self, app):
        from models.user import get_user_by_username

        result = app.test_cli_runner().invoke(args=['create-admin', 'gerente', '--password', 'secreto1'])

        assert result.exit_code == 0
        assert get_user_by_username('gerente')['role'] == 'admin'

    def test_duplicate_fails(self, app):
        result = app.test_cli_runner().invoke(args=['create-admin', 'admin', '--password', 'secreto1'])
        assert result.exit_code == 1
