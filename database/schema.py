"""
Database schema definitions.
Table creation, indexes, triggers and structure management.
"""

# Active statuses as they appear in SQL. Kept in sync with
# models.reservation_state.ACTIVE_STATUSES.
_ACTIVE_SQL = "('pending', 'confirmed')"


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'menu_items',
        'menu_categories',
        'payment_config',
        'events',
        'reservations',
        'room_images',
        'rooms',
        'users'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Users
    db.execute('''
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'user'
                CHECK (role IN ('admin', 'employee', 'user')),
            phone TEXT UNIQUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            last_login TIMESTAMP
        )
    ''')

    # 2. Rooms & images
    db.execute('''
        CREATE TABLE rooms (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            number INTEGER UNIQUE NOT NULL,
            room_type TEXT NOT NULL,
            price REAL NOT NULL CHECK (price >= 0),
            description TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE room_images (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            room_id INTEGER NOT NULL REFERENCES rooms(id) ON DELETE CASCADE,
            filename TEXT NOT NULL,
            position INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 3. Reservations (dates stored as 'YYYY-MM-DD HH:MM:SS', end exclusive)
    db.execute('''
        CREATE TABLE reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            room_id INTEGER NOT NULL REFERENCES rooms(id) ON DELETE RESTRICT,
            user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
            guest_name TEXT,
            guest_email TEXT,
            guest_phone TEXT,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'confirmed', 'cancelled')),
            total_price REAL NOT NULL CHECK (total_price >= 0),
            payment_method TEXT NOT NULL CHECK (payment_method IN ('cash', 'transfer')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK (end_date > start_date)
        )
    ''')

    # 4. Social-area events
    db.execute('''
        CREATE TABLE events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            client_name TEXT NOT NULL,
            client_phone TEXT,
            event_date TEXT NOT NULL,
            start_time TEXT,
            end_time TEXT,
            usage_description TEXT,
            attendee_limit INTEGER CHECK (attendee_limit IS NULL OR attendee_limit > 0),
            rented_area TEXT NOT NULL DEFAULT 'Área Social',
            amount REAL NOT NULL CHECK (amount >= 0),
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'confirmed', 'cancelled')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 5. Payment configuration (singleton row)
    db.execute('''
        CREATE TABLE payment_config (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            identifier TEXT UNIQUE NOT NULL DEFAULT 'main',
            bank TEXT NOT NULL,
            account_number TEXT NOT NULL,
            clabe TEXT NOT NULL,
            whatsapp_url TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 6. Menu catalog
    db.execute('''
        CREATE TABLE menu_categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE menu_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT,
            price REAL NOT NULL CHECK (price >= 0),
            category_id INTEGER NOT NULL REFERENCES menu_categories(id),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""

    # Reservation indexes
    db.execute('''
        CREATE INDEX idx_reservations_room_window
        ON reservations(room_id, status, start_date, end_date)
    ''')
    db.execute('CREATE INDEX idx_reservations_start ON reservations(start_date)')
    db.execute('CREATE INDEX idx_reservations_user ON reservations(user_id)')

    # Room image ordering
    db.execute('CREATE INDEX idx_room_images_room ON room_images(room_id, position)')

    # Events and menu
    db.execute('CREATE INDEX idx_events_date ON events(event_date)')
    db.execute('CREATE INDEX idx_menu_items_category ON menu_items(category_id)')


def create_triggers(db):
    """
    Create triggers that keep active reservations of a room from overlapping.

    The model layer checks for conflicts before writing; these triggers make
    the store reject any write that slips past that check. The abort message
    'double_booking' is matched by models.reservation_crud.
    """
    db.execute(f'''
        CREATE TRIGGER reservations_no_overlap_insert
        BEFORE INSERT ON reservations
        WHEN NEW.status IN {_ACTIVE_SQL}
        BEGIN
            SELECT RAISE(ABORT, 'double_booking')
            WHERE EXISTS (
                SELECT 1 FROM reservations r
                WHERE r.room_id = NEW.room_id
                  AND r.status IN {_ACTIVE_SQL}
                  AND r.start_date < NEW.end_date
                  AND r.end_date > NEW.start_date
            );
        END
    ''')

    db.execute(f'''
        CREATE TRIGGER reservations_no_overlap_update
        BEFORE UPDATE OF room_id, start_date, end_date, status ON reservations
        WHEN NEW.status IN {_ACTIVE_SQL}
        BEGIN
            SELECT RAISE(ABORT, 'double_booking')
            WHERE EXISTS (
                SELECT 1 FROM reservations r
                WHERE r.room_id = NEW.room_id
                  AND r.id != NEW.id
                  AND r.status IN {_ACTIVE_SQL}
                  AND r.start_date < NEW.end_date
                  AND r.end_date > NEW.start_date
            );
        END
    ''')
