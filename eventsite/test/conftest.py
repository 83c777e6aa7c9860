"""
Pytest configuration and fixtures for the event site tests
"""
import os
import tempfile

# Keep test logs out of the working tree
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='eventsite-logs-'))

import pytest
from eventsite import create_app
from eventsite import db as _db
from eventsite.services.user_service import UserService


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret-key',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'WTF_CSRF_ENABLED': False,
    'RATELIMIT_ENABLED': False,
    'ENABLE_HTTPS': False,
    'FORCE_HTTPS_REDIRECT': False,
    'SESSION_COOKIE_SECURE': False,
    'EVENTS_PER_PAGE': 10,
    'ADMIN_USERNAME': 'admin',
    'ADMIN_NAME': 'Admin',
    'ADMIN_PASSWORD': 'admin-password',
}

ADMIN_PASSWORD = 'admin-password'
MANAGER_PASSWORD = 'manager-password'


@pytest.fixture(scope='function')
def app():
    """Create Flask application backed by an in-memory database"""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def app_ctx(app):
    """Application context for calling services directly"""
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def admin_user(app):
    with app.app_context():
        user = UserService.create_user('Admin', 'admin', ADMIN_PASSWORD, is_admin=True)
        return user.id


@pytest.fixture(scope='function')
def manager_user(app):
    with app.app_context():
        user = UserService.create_user('Manager Person', 'manager', MANAGER_PASSWORD)
        return user.id


@pytest.fixture(scope='function')
def admin_client(client, admin_user):
    """Test client logged in as the admin"""
    login_user(client, 'admin', ADMIN_PASSWORD)
    return client


@pytest.fixture(scope='function')
def manager_client(client, manager_user):
    """Test client logged in as an event manager"""
    login_user(client, 'manager', MANAGER_PASSWORD)
    return client


def login_user(client, username='admin', password=ADMIN_PASSWORD):
    """Helper function to login a user"""
    return client.post('/user/login', data={
        'username': username,
        'password': password
    })


def create_event(app, name, description=''):
    """Insert an event directly and return its slug"""
    from eventsite.services.event_service import EventService

    with app.app_context():
        return EventService.create_event(name, description).slug
