"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'palapa_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    # Ensure test database path is set
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app(tmp_path):
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def admin_client(app, client):
    """Test client logged in as the seeded admin."""
    response = client.post('/api/auth/login', json={
        'username': 'admin',
        'password': 'admin123'
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def employee_client(app):
    """Test client logged in as a front-desk employee."""
    from models.user import create_user

    create_user('recepcion', 'recepcion123', role='employee')
    client = app.test_client()
    response = client.post('/api/auth/login', json={
        'username': 'recepcion',
        'password': 'recepcion123'
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def rooms(app):
    """Three rooms: 101 at 500/night, 102 at 750/night, 201 at 1200/night."""
    from models.room import create_room

    return {
        101: create_room(101, 'Sencilla', 500),
        102: create_room(102, 'Doble', 750),
        201: create_room(201, 'Suite', 1200, 'Vista al jardín'),
    }


class RecordingTransport:
    """Mail transport that keeps sent messages in memory."""

    def __init__(self, failures=0):
        self.sent = []
        self.attempts = 0
        self.failures = failures

    def send(self, message):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise ConnectionError('SMTP unavailable')
        self.sent.append(message)


@pytest.fixture
def outbox(app):
    """Enable mail delivery into a RecordingTransport and return it."""
    from extensions import notifier

    transport = RecordingTransport()
    app.config['MAIL_ENABLED'] = True
    app.config['MAIL_SENDER'] = 'reservas@palapa.test'
    notifier.transport = transport
    return transport


@pytest.fixture
def recording_transport():
    """The RecordingTransport class, for tests that build their own dispatcher."""
    return RecordingTransport


@pytest.fixture
def interleave(app):
    """
    Run a write from a second connection while a statement of the app
    connection starts.

    interleave(marker, sql, params) arms the hook; it fires once, on the first
    app statement containing marker. The second connection does not wait for
    locks. The returned dict records 'committed' or the sqlite3 error text.
    """
    import sqlite3
    from database import get_db

    db = get_db()
    outcome = {}

    def arm(marker, sql, params=()):
        def hook(statement):
            if outcome or marker not in statement:
                return
            other = sqlite3.connect(app.config['DATABASE_PATH'], timeout=0)
            try:
                other.execute(sql, params)
                other.commit()
                outcome['result'] = 'committed'
            except sqlite3.OperationalError as e:
                outcome['result'] = str(e)
            finally:
                other.close()

        db.set_trace_callback(hook)
        return outcome

    yield arm
    db.set_trace_callback(None)
