"""
JSON API routes package.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.api import config
from blueprints.api import events
from blueprints.api import menu
from blueprints.api import reservations
from blueprints.api import rooms
from blueprints.api import users

# Register all route functions on the blueprint
config.register_routes(api_bp)
events.register_routes(api_bp)
menu.register_routes(api_bp)
reservations.register_routes(api_bp)
rooms.register_routes(api_bp)
users.register_routes(api_bp)
