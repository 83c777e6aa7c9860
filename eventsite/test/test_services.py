"""
Tests for the data access services
"""

from unittest.mock import patch
from sqlalchemy.exc import IntegrityError
from eventsite import db
from eventsite.services import EventService, RegistrationService, UserService


def test_create_event_derives_slug(app_ctx):
    event = EventService.create_event('Summer Party', 'Outdoors')

    assert event is not None
    assert event.slug == 'summer-party'
    assert EventService.list_event('summer-party').name == 'Summer Party'
    assert EventService.list_event_by_name('Summer Party').id == event.id
    assert EventService.list_event_by_id(event.id).description == 'Outdoors'


def test_colliding_slugs_get_suffix(app_ctx):
    first = EventService.create_event('Party!')
    second = EventService.create_event('Party?')

    assert first.slug == 'party'
    assert second.slug == 'party-2'


def test_lookups_return_none_when_missing(app_ctx):
    assert EventService.list_event('nope') is None
    assert EventService.list_event_by_name('nope') is None
    assert EventService.list_event_by_id(999) is None
    assert UserService.find_by_username('nobody') is None
    assert UserService.find_by_username(None) is None
    assert RegistrationService.list_registered(999) == []


def test_list_and_paginate_events(app_ctx):
    for i in range(5):
        EventService.create_event(f'Event {i}')

    assert [e.name for e in EventService.list_events()] == [f'Event {i}' for i in range(5)]

    page = EventService.paginate_events(page=2, per_page=2)
    assert [e.name for e in page.items] == ['Event 2', 'Event 3']
    assert page.pages == 3

    assert EventService.paginate_events(page=10, per_page=2).items == []
    assert EventService.paginate_events(page=0, per_page=2).page == 1


def test_update_event_rederives_slug(app_ctx):
    event = EventService.create_event('Old Name', 'Old')

    assert EventService.update_event(event.id, 'New Name', 'New') is True

    updated = EventService.list_event_by_id(event.id)
    assert updated.slug == 'new-name'
    assert updated.description == 'New'
    assert EventService.list_event('old-name') is None


def test_update_event_keeping_name_keeps_slug(app_ctx):
    event = EventService.create_event('Same')

    assert EventService.update_event(event.id, 'Same', 'Changed') is True
    assert EventService.list_event_by_id(event.id).slug == 'same'


def test_update_to_existing_name_reports_failure(app_ctx):
    EventService.create_event('Alpha')
    bravo = EventService.create_event('Bravo', 'Second')

    assert EventService.update_event(bravo.id, 'Alpha', '') is False

    unchanged = EventService.list_event_by_id(bravo.id)
    assert unchanged.name == 'Bravo'
    assert unchanged.slug == 'bravo'
    assert unchanged.description == 'Second'


def test_update_missing_event_fails(app_ctx):
    assert EventService.update_event(12345, 'Name') is False


def test_delete_event_removes_registrations(app_ctx):
    event = EventService.create_event('Doomed')
    RegistrationService.register(event.id, 'Jon', 'hi')

    assert EventService.delete_event(event.id) is True
    assert EventService.list_event('doomed') is None
    assert RegistrationService.list_registered(event.id) == []
    assert EventService.delete_event(event.id) is False


def test_create_event_reports_failure(app_ctx):
    with patch.object(db.session, 'commit', side_effect=IntegrityError('INSERT', {}, Exception('boom'))):
        assert EventService.create_event('Broken') is None

    assert EventService.list_event_by_name('Broken') is None


def test_register_and_list(app_ctx):
    event = EventService.create_event('Meetup')
    RegistrationService.register(event.id, 'Anna', 'first')
    RegistrationService.register(event.id, 'Anna', 'again')

    registered = RegistrationService.list_registered(event.id)
    assert [(r.name, r.comment) for r in registered] == [('Anna', 'first'), ('Anna', 'again')]


def test_create_user_hashes_password(app_ctx):
    user = UserService.create_user('Jon Jonsson', 'jon', 'secret1')

    assert user.password_hash != 'secret1'
    assert user.check_password('secret1')
    assert not user.check_password('wrong')
    assert user.capabilities == frozenset({'manage_events'})
    assert UserService.find_by_id(user.id).username == 'jon'
    assert not UserService.is_admin('jon')


def test_admin_capabilities(app_ctx):
    UserService.create_user('Admin', 'admin', 'secret1', is_admin=True)

    assert UserService.is_admin('admin')
    assert UserService.find_by_username('admin').capabilities == frozenset({'admin', 'manage_events'})


def test_duplicate_username_reports_failure(app_ctx):
    UserService.create_user('Jon', 'jon', 'secret1')

    assert UserService.create_user('Other', 'jon', 'secret2') is None
