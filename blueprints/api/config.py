"""
Hotel configuration API routes: public contact link and payment details.
"""

from flask import current_app
from flask_login import login_required

from models.errors import NotFound
from models.payment_config import get_payment_config, get_contact_config, set_payment_config
from utils.api_response import api_success, require_json
from utils.decorators import role_required
from utils.messages import MESSAGES


def register_routes(bp):
    """Register configuration API routes on the blueprint."""

    @bp.route('/health')
    def health_check():
        """Health check endpoint (no authentication required)."""
        return api_success(data={
            'status': 'ok',
            'app': current_app.config.get('APP_NAME'),
            'version': current_app.config.get('APP_VERSION'),
        })

    @bp.route('/config/contact')
    def config_contact():
        """WhatsApp link shown on the public site."""
        contact = get_contact_config()
        if not contact:
            raise NotFound(MESSAGES['payment_config_not_found'])
        return api_success(data=contact)

    @bp.route('/config/payment')
    @login_required
    @role_required('admin')
    def config_payment():
        config = get_payment_config()
        if not config:
            raise NotFound(MESSAGES['payment_config_not_found'])
        return api_success(data=config)

    @bp.route('/config/payment', methods=['PUT'])
    @login_required
    @role_required('admin')
    def config_payment_update():
        """Replace {bank, account_number, clabe, whatsapp_url}; all required."""
        data = require_json()
        config = set_payment_config(**{k: data.get(k) for k in ('bank', 'account_number', 'clabe', 'whatsapp_url')})
        return api_success(data=config, message=MESSAGES['payment_config_updated'])
