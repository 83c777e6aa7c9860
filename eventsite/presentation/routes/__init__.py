"""
Routes package
Public pages, the login blueprint, and one event management area per role
"""

from eventsite.business.context import current_context
from eventsite.logger import get_logger

logger = get_logger("eventsite.routes")


def init_app(app):
    """Register all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from eventsite.auth import user_auth
    from .public import bp as public_bp
    from .event_management import create_event_management_blueprint, ADMIN_ROLE, EVENT_MANAGER_ROLE

    app.register_blueprint(user_auth, url_prefix='/user')
    app.register_blueprint(create_event_management_blueprint(EVENT_MANAGER_ROLE), url_prefix='/user')
    app.register_blueprint(create_event_management_blueprint(ADMIN_ROLE), url_prefix='/admin')
    app.register_blueprint(public_bp)

    @app.context_processor
    def inject_context():
        # Templates rendered outside a handler (error pages) still see the identity
        return {'ctx': current_context()}

    logger.info("All route blueprints registered successfully")
