"""
Database build for the event site
Creates tables, seeds the admin account and optionally inserts demo events
"""

from flask import current_app
from eventsite import db
from eventsite.logger import get_logger

logger = get_logger("eventsite.build")

DEMO_EVENTS = [
    {'name': 'Forritarahittingur', 'description': 'Monthly meetup for programmers. Bring a laptop.'},
    {'name': 'Hönnunarkeppni', 'description': 'Design competition for students of all levels.'},
    {'name': 'Verkefnakynning', 'description': 'Final project presentations.'},
]


def verify_critical_data():
    """
    Check that the admin account exists.

    Returns:
        bool: True if the configured admin user is present and flagged admin
    """
    from eventsite.services.user_service import UserService

    admin = UserService.find_by_username(current_app.config['ADMIN_USERNAME'])
    if admin is None or not admin.is_admin:
        logger.warning("Admin user not found")
        return False
    return True


def insert_critical_data():
    """
    Create the admin account from ADMIN_USERNAME / ADMIN_PASSWORD.

    Raises:
        RuntimeError: If the admin is missing and ADMIN_PASSWORD is not set,
            or the insert fails
    """
    from eventsite.services.user_service import UserService

    if verify_critical_data():
        logger.info("Critical data already present, skipping insertion")
        return

    password = current_app.config.get('ADMIN_PASSWORD')
    if not password:
        raise RuntimeError("ADMIN_PASSWORD is required to create the admin user. Run generate_env.py first.")

    admin = UserService.create_user(
        current_app.config['ADMIN_NAME'],
        current_app.config['ADMIN_USERNAME'],
        password,
        is_admin=True,
        can_manage_events=True,
    )
    if admin is None:
        raise RuntimeError("Failed to create admin user")
    logger.info(f"Created admin user '{admin.username}'")


def insert_demo_data():
    """Insert sample events that are not present yet"""
    from eventsite.services.event_service import EventService

    created = 0
    for item in DEMO_EVENTS:
        if EventService.list_event_by_name(item['name']) is not None:
            continue
        if EventService.create_event(item['name'], item['description']) is not None:
            created += 1
    logger.info(f"Inserted {created} demo event(s)")


def build_database(app, enable_demo_data=False):
    """
    Build the database inside app's context.

    Args:
        app: Flask application
        enable_demo_data (bool): Insert the sample events
    """
    with app.app_context():
        logger.info("Creating tables")
        db.create_all()

        # Critical data is always checked
        insert_critical_data()

        if enable_demo_data:
            insert_demo_data()

    logger.info("Database build complete")
