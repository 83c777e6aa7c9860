"""
Tests for login, logout, signup and the auth gate
"""

import pytest
from conftest import login_user, create_event, MANAGER_PASSWORD
from eventsite.services import EventService, UserService


PROTECTED_GETS = ['/admin', '/user', '/admin/some-event', '/user/some-event']
PROTECTED_POSTS = ['/admin', '/user', '/admin/some-event', '/user/some-event', '/admin/delete?slug=some-event']


@pytest.mark.parametrize('path', PROTECTED_GETS)
def test_anonymous_get_redirects_to_login(client, app, path):
    create_event(app, 'Some Event')

    response = client.get(path)

    assert response.status_code == 302
    assert '/user/login' in response.headers['Location']


@pytest.mark.parametrize('path', PROTECTED_POSTS)
def test_anonymous_post_redirects_without_running_handler(client, app, path):
    slug = create_event(app, 'Some Event')

    response = client.post(path, data={'name': 'Hijacked', 'description': ''})

    assert response.status_code == 302
    assert '/user/login' in response.headers['Location']
    with app.app_context():
        assert EventService.list_event(slug).name == 'Some Event'
        assert EventService.list_event_by_name('Hijacked') is None


def test_event_manager_cannot_reach_admin(manager_client, app):
    slug = create_event(app, 'Some Event')

    response = manager_client.get('/admin')
    assert response.status_code == 302
    assert '/user/login' in response.headers['Location']

    response = manager_client.post(f'/admin/delete?slug={slug}')
    assert response.status_code == 302
    with app.app_context():
        assert EventService.list_event(slug) is not None


def test_user_without_capability_is_redirected(client, app):
    with app.app_context():
        UserService.create_user('Visitor', 'visitor', 'visitor-pw', can_manage_events=False)
    login_user(client, 'visitor', 'visitor-pw')

    response = client.get('/user')

    assert response.status_code == 302
    assert '/user/login' in response.headers['Location']


def test_login_page(client):
    response = client.get('/user/login')
    assert response.status_code == 200
    assert b'name="username"' in response.data


def test_login_success_redirects_home(client, manager_user):
    response = login_user(client, 'manager', MANAGER_PASSWORD)

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/')

    # Already authenticated users skip the login page
    assert client.get('/user/login').status_code == 302


def test_login_honours_local_next(client, manager_user):
    response = client.post('/user/login', data={
        'username': 'manager', 'password': MANAGER_PASSWORD, 'next': '/user'
    })
    assert response.headers['Location'].endswith('/user')


def test_login_ignores_external_next(client, manager_user):
    response = client.post('/user/login', data={
        'username': 'manager', 'password': MANAGER_PASSWORD, 'next': 'https://evil.example/'
    })
    assert 'evil.example' not in response.headers['Location']


def test_login_failure(client, manager_user):
    response = login_user(client, 'manager', 'wrong-password')

    assert response.status_code == 302
    assert '/user/login' in response.headers['Location']

    page = client.get('/user/login')
    assert b'Invalid username or password' in page.data
    assert client.get('/user').status_code == 302


def test_login_missing_fields(client):
    response = client.post('/user/login', data={'username': 'manager'})
    assert response.status_code == 302
    assert b'Please enter both username and password' in client.get('/user/login').data


def test_logout(manager_client):
    assert manager_client.get('/user').status_code == 200

    response = manager_client.get('/user/logout')

    assert response.status_code == 302
    assert manager_client.get('/user').status_code == 302


def test_admin_logout(admin_client):
    assert admin_client.get('/admin').status_code == 200

    response = admin_client.get('/admin/logout')

    assert response.status_code == 302
    assert admin_client.get('/admin').status_code == 302


def test_signup_page(client):
    response = client.get('/user/signup')
    assert response.status_code == 200
    assert b'name="password"' in response.data


def test_signup_creates_event_manager_and_logs_in(client, app):
    response = client.post('/user/signup', data={
        'name': 'New Person', 'username': 'newbie', 'password': 'secret1'
    })

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/user')
    assert client.get('/user').status_code == 200

    with app.app_context():
        user = UserService.find_by_username('newbie')
        assert user.name == 'New Person'
        assert user.can_manage_events
        assert not user.is_admin
        assert user.check_password('secret1')


def test_signup_validation_errors(client, app):
    with app.app_context():
        UserService.create_user('Taken', 'taken', 'secret1')

    response = client.post('/user/signup', data={
        'name': '', 'username': 'taken', 'password': 'shrt'
    })

    assert response.status_code == 400
    assert b'Name is required' in response.data
    assert b'Username is already taken.' in response.data
    assert b'Password must be at least 6 characters.' in response.data
    # Username is kept, the password is not echoed back
    assert b'value="taken"' in response.data
    assert b'shrt' not in response.data


def test_signup_strips_markup_from_name(client, app):
    client.post('/user/signup', data={
        'name': '<b>Bold</b> Name<script>x()</script>', 'username': 'bold', 'password': 'secret1'
    })

    with app.app_context():
        assert UserService.find_by_username('bold').name == 'Bold Name'
