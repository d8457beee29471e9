"""
Palapa La Casona - Hotel Administration Backend
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g, send_from_directory
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager, csrf, notifier

# Import database functions
from database import close_db, init_db

from models.errors import BookingError
from utils.api_response import api_error, api_exception
from utils.messages import MESSAGES


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    if config_name == 'production':
        config[config_name].validate()

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)
    # Initialize CSRF Protection
    csrf.init_app(app)
    # Bind the notification dispatcher to this app's mail settings
    notifier.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.auth.routes import auth_bp
    from blueprints.api import api_bp

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(api_bp, url_prefix='/api')

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        """Serve stored room images."""
        folder = app.config['UPLOAD_FOLDER']
        if not os.path.isabs(folder):
            folder = os.path.join(app.root_path, folder)
        return send_from_directory(folder, filename)


def register_error_handlers(app):
    """Register JSON error handlers."""

    @app.errorhandler(BookingError)
    def booking_error(error):
        """Domain errors carry their own status and kind."""
        if error.status >= 500:
            app.logger.error('%s: %s', error.kind, error.message)
        return api_exception(error)

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(MESSAGES['not_found'], status=404, kind='not_found')

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return api_error(MESSAGES['method_not_allowed'], status=405, kind='method_not_allowed')

    @app.errorhandler(413)
    def payload_too_large_error(error):
        return api_error(MESSAGES['payload_too_large'], status=413, kind='payload_too_large')

    @app.errorhandler(HTTPException)
    def http_error(error):
        return api_error(error.description, status=error.code, kind=error.name.lower().replace(' ', '_'))

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        app.logger.error('Unhandled error: %s', getattr(error, 'original_exception', error))
        return api_error(MESSAGES['server_error'], status=500, kind='server_error')


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-admin')
    @click.argument('username')
    @click.password_option()
    def create_admin_command(username, password):
        """Create a new admin user."""
        from models.user import create_user

        with app.app_context():
            try:
                user_id = create_user(username=username, password=password, role='admin')
                click.echo(f'Admin created successfully! ID: {user_id}')
            except BookingError as e:
                click.echo(f'Error creating admin: {e.message}', err=True)
                raise SystemExit(1)


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/palapa.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        # Module loggers (models.*, services.*) share the app's handler
        for name in ('models', 'services'):
            logging.getLogger(name).addHandler(file_handler)
            logging.getLogger(name).setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Palapa startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
