"""
Test application factory and configuration.
"""

import pytest
from app import create_app


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app is not None
        assert app.config['TESTING'] is True
        assert app.config['WTF_CSRF_ENABLED'] is False
        assert app.config['MAIL_ENABLED'] is False

    def test_create_app_production_requires_secret(self, monkeypatch):
        """Production refuses to start without a strong SECRET_KEY."""
        monkeypatch.delenv('SECRET_KEY', raising=False)
        with pytest.raises(ValueError):
            create_app('production')

    def test_app_has_blueprints(self):
        """Test that all blueprints are registered."""
        app = create_app('test')
        blueprint_names = list(app.blueprints.keys())

        assert 'auth' in blueprint_names
        assert 'api' in blueprint_names

    def test_app_has_extensions(self):
        """Test that extensions are initialized."""
        app = create_app('test')

        assert hasattr(app, 'login_manager')
        assert 'csrf' in app.extensions
        assert 'notifier' in app.extensions


class TestAppConfiguration:
    """Test application configuration."""

    def test_secret_key_set(self):
        """Test that secret key is configured."""
        app = create_app('test')
        assert app.config['SECRET_KEY'] is not None
        assert len(app.config['SECRET_KEY']) > 0

    def test_database_path_set(self):
        """Test that database path is configured."""
        app = create_app('test')
        assert 'DATABASE_PATH' in app.config

    def test_app_name_set(self):
        """Test that app name is configured."""
        app = create_app('test')
        assert app.config.get('APP_NAME') == 'Palapa La Casona'


class TestCLICommands:
    """Test CLI command registration."""

    def test_cli_commands_registered(self):
        """Test that CLI commands are registered."""
        app = create_app('test')

        commands = list(app.cli.commands.keys())

        assert 'init-db' in commands
        assert 'create-admin' in commands


class TestCsrf:
    """State-changing calls need a token when CSRF is on."""

    def test_post_without_token_rejected(self, app, client):
        app.config['WTF_CSRF_ENABLED'] = True

        response = client.post('/api/menu/categories', json={'name': 'Mariscos'})

        assert response.status_code == 400
        assert response.get_json()['kind'] == 'bad_request'

    def test_login_with_token(self, app, client):
        app.config['WTF_CSRF_ENABLED'] = True

        token = client.get('/api/auth/csrf-token').get_json()['data']['csrf_token']
        response = client.post('/api/auth/login',
                               json={'username': 'admin', 'password': 'admin123'},
                               headers={'X-CSRFToken': token})

        assert response.status_code == 200
