"""
Payment configuration data access functions.
Handles the single row of bank transfer and WhatsApp contact details shown
to guests.
"""

from typing import Optional, Dict, Any

from database import get_db
from models.errors import ValidationError
from utils.messages import MESSAGES
from utils.validators import sanitize_input

PAYMENT_CONFIG_IDENTIFIER = 'main'

PAYMENT_CONFIG_FIELDS = ('bank', 'account_number', 'clabe', 'whatsapp_url')


def get_payment_config() -> Optional[Dict[str, Any]]:
    """
    Get the payment configuration.

    Returns:
        Dict with bank, account_number, clabe and whatsapp_url, or None
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT bank, account_number, clabe, whatsapp_url, updated_at
        FROM payment_config WHERE identifier = ?
    ''', (PAYMENT_CONFIG_IDENTIFIER,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_contact_config() -> Optional[Dict[str, Any]]:
    """Public subset of the payment configuration (WhatsApp link only)."""
    config = get_payment_config()
    if not config:
        return None
    return {'whatsapp_url': config['whatsapp_url']}


def set_payment_config(**values) -> Dict[str, Any]:
    """
    Create or replace the payment configuration.

    Args:
        **values: bank, account_number, clabe, whatsapp_url (all required)

    Returns:
        The stored configuration

    Raises:
        ValidationError: If any field is missing
    """
    cleaned = {field: sanitize_input(values.get(field), max_length=500) for field in PAYMENT_CONFIG_FIELDS}
    if not all(cleaned.values()):
        raise ValidationError(MESSAGES['payment_config_required_fields'])

    db = get_db()
    db.execute('''
        INSERT INTO payment_config (identifier, bank, account_number, clabe, whatsapp_url)
        VALUES (:identifier, :bank, :account_number, :clabe, :whatsapp_url)
        ON CONFLICT(identifier) DO UPDATE SET
            bank = excluded.bank,
            account_number = excluded.account_number,
            clabe = excluded.clabe,
            whatsapp_url = excluded.whatsapp_url,
            updated_at = CURRENT_TIMESTAMP
    ''', {'identifier': PAYMENT_CONFIG_IDENTIFIER, **cleaned})
    db.commit()

    return get_payment_config()
