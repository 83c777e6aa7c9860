from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from eventsite.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "200 per hour"],
    storage_uri="memory://"
)


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(test_config=None):
    """
    Application factory.

    Args:
        test_config (dict, optional): Config values applied over the
            environment-derived settings before extensions are initialized

    Returns:
        Flask: The configured application
    """
    from pathlib import Path

    base_dir = Path(__file__).parent

    app = Flask(__name__,
                template_folder=str(base_dir / 'presentation' / 'templates'),
                static_folder=str(base_dir / 'presentation' / 'static'))

    logger = get_logger("eventsite")
    logger.info("Initializing Flask application")

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    instance_dir = base_dir.parent / 'instance'
    default_db_path = instance_dir / 'events.db'
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get(
        'DATABASE_URL', f"sqlite:///{default_db_path.resolve()}"
    )
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    app.config['EVENTS_PER_PAGE'] = int(os.environ.get('EVENTS_PER_PAGE', '10'))

    # HTTPS is opt-in; enable behind a TLS terminating proxy
    app.config['ENABLE_HTTPS'] = _env_flag('ENABLE_HTTPS')
    app.config['FORCE_HTTPS_REDIRECT'] = _env_flag('FORCE_HTTPS_REDIRECT')

    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['PERMANENT_SESSION_LIFETIME'] = int(os.environ.get('PERMANENT_SESSION_LIFETIME', '3600'))

    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')

    app.config['ADMIN_USERNAME'] = os.environ.get('ADMIN_USERNAME', 'admin')
    app.config['ADMIN_PASSWORD'] = os.environ.get('ADMIN_PASSWORD')
    app.config['ADMIN_NAME'] = os.environ.get('ADMIN_NAME', 'Admin')

    if test_config:
        app.config.update(test_config)

    # SECURITY: Require SECRET_KEY - no fallback
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
        instance_dir.mkdir(parents=True, exist_ok=True)

    if app.config['ENABLE_HTTPS']:
        logger.info("HTTPS enforcement enabled")
    else:
        logger.warning("HTTPS enforcement disabled - acceptable for development only")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    login_manager.login_view = 'user_auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'info'

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from eventsite.data.user import User
    from eventsite.data.event import Event
    from eventsite.data.registration import Registration

    # Register blueprints
    from eventsite.presentation.routes import init_app as init_routes
    init_routes(app)

    from eventsite.presentation.errors import register_error_handlers
    register_error_handlers(app)

    @app.before_request
    def enforce_https():
        """Redirect HTTP requests to HTTPS if HTTPS enforcement is enabled"""
        if app.config.get('ENABLE_HTTPS') and app.config.get('FORCE_HTTPS_REDIRECT'):
            from flask import request, redirect

            if not request.is_secure and not request.headers.get('X-Forwarded-Proto') == 'https':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:;"
        )
        if app.config.get('ENABLE_HTTPS'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    logger.info("Flask application initialization complete")

    return app
