"""
Tests for hotel payment configuration and public config endpoints.
"""

import pytest

NEW_CONFIG = {
    'bank': 'Banorte',
    'account_number': '0123456789',
    'clabe': '072 180 00123456789 1',
    'whatsapp_url': 'https://wa.me/529511234567',
}


class TestPaymentConfigModel:

    def test_seeded(self, app):
        from models.payment_config import get_payment_config, get_contact_config

        assert get_payment_config()['bank'] == 'BBVA'
        assert set(get_contact_config()) == {'whatsapp_url'}

    def test_replace(self, app):
        from models.payment_config import set_payment_config, get_payment_config

        set_payment_config(**NEW_CONFIG)
        assert get_payment_config()['clabe'] == NEW_CONFIG['clabe']

    def test_all_fields_required(self, app):
        from models.errors import ValidationError
        from models.payment_config import set_payment_config

        with pytest.raises(ValidationError):
            set_payment_config(**{**NEW_CONFIG, 'clabe': ' '})


class TestConfigRoutes:

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'ok'

    def test_contact_is_public(self, client):
        response = client.get('/api/config/contact')
        assert response.status_code == 200
        assert response.get_json()['data']['whatsapp_url'].startswith('https://wa.me/')

    def test_payment_requires_login(self, client):
        assert client.get('/api/config/payment').status_code == 401

    def test_payment_requires_admin(self, employee_client):
        assert employee_client.get('/api/config/payment').status_code == 403

    def test_update(self, admin_client):
        response = admin_client.put('/api/config/payment', json=NEW_CONFIG)
        assert response.status_code == 200
        assert admin_client.get('/api/config/payment').get_json()['data']['bank'] == 'Banorte'

    def test_update_missing_field(self, admin_client):
        response = admin_client.put('/api/config/payment', json={'bank': 'Banorte'})
        assert response.status_code == 400
        assert response.get_json()['kind'] == 'validation_error'

    def test_reservation_response_includes_payment_config(self, client, rooms):
        response = client.post('/api/reservations', json={
            'room_id': rooms[101],
            'start_date': '2025-06-01',
            'end_date': '2025-06-03',
            'payment_method': 'transfer',
        })
        assert response.status_code == 201
        assert response.get_json()['payment_config']['bank'] == 'BBVA'

    def test_unknown_route(self, client):
        response = client.get('/api/nada')
        assert response.status_code == 404
        assert response.get_json()['kind'] == 'not_found'
