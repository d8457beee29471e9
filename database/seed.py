"""
Database seed data.
Initial data population for fresh database installations.
"""

from werkzeug.security import generate_password_hash

DEFAULT_PAYMENT_CONFIG = {
    'identifier': 'main',
    'bank': 'BBVA',
    'account_number': '4152 31384699 4205',
    'clabe': '012 180 01573294185 1',
    'whatsapp_url': 'https://wa.me/529514401726?text=Hola,%20aquí%20está%20el%20comprobante%20de%20mi%20reserva.',
}


def seed_database(db):
    """Insert initial seed data."""

    # 1. Payment configuration shown to guests paying by transfer
    db.execute('''
        INSERT INTO payment_config (identifier, bank, account_number, clabe, whatsapp_url)
        VALUES (:identifier, :bank, :account_number, :clabe, :whatsapp_url)
    ''', DEFAULT_PAYMENT_CONFIG)

    # 2. Create Admin User
    password_hash = generate_password_hash('admin123')
    db.execute('''
        INSERT INTO users (username, password_hash, role)
        VALUES (?, ?, ?)
    ''', ('admin', password_hash, 'admin'))

    # 3. Default menu categories
    for name in ('Bebidas', 'Desayunos', 'Platos Fuertes', 'Postres'):
        db.execute('INSERT INTO menu_categories (name) VALUES (?)', (name,))
