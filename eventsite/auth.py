from functools import wraps
from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_user, logout_user, current_user
from urllib.parse import urlparse
from eventsite import limiter, login_manager
from eventsite.business.context import current_context
from eventsite.business.forms import LoginForm, SignupForm
from eventsite.services.user_service import UserService
from eventsite.utils.logging_sanitizer import sanitize_form_data
from eventsite.logger import get_logger

logger = get_logger("eventsite.auth")
user_auth = Blueprint('user_auth', __name__)


def login_required(f):
    """Redirect to the login page unless the session is authenticated"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            logger.debug(f"Anonymous request to {request.path} sent to login")
            return login_manager.unauthorized()
        return f(*args, **kwargs)
    return decorated_function


def capability_required(capability):
    """
    Redirect to the login page unless the session's user carries capability.
    Implies login_required.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            ctx = current_context()
            if not ctx.is_authenticated or not ctx.can(capability):
                who = ctx.username or 'anonymous'
                logger.warning(f"User {who} lacks '{capability}' for {request.path}, redirecting to login")
                return login_manager.unauthorized()
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def _safe_next(default_endpoint='public.index'):
    next_page = request.args.get('next') or request.form.get('next')
    if not next_page or urlparse(next_page).netloc != '' or not next_page.startswith('/'):
        return url_for(default_endpoint)
    return next_page


@user_auth.route('/login', methods=['GET'])
def login():
    if current_user.is_authenticated:
        logger.debug(f"User {current_user.username} already authenticated, redirecting to index")
        return redirect(url_for('public.index'))

    return render_template('login.html', title='Log in', next=request.args.get('next', ''))


@user_auth.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login_submit():
    form = LoginForm.from_request(request.form)

    logger.debug(f"Login attempt for username: {form.username}")

    if not form.is_complete:
        flash('Please enter both username and password', 'error')
        return redirect(url_for('user_auth.login', next=request.form.get('next') or None))

    user = UserService.find_by_username(form.username)

    if user is None or not user.check_password(form.password) or not user.is_active:
        logger.warning(f"Failed login attempt for username: {form.username}")
        flash('Invalid username or password', 'error')
        return redirect(url_for('user_auth.login', next=request.form.get('next') or None))

    login_user(user)
    logger.info(f"Successful login for user: {form.username}")
    return redirect(_safe_next())


@user_auth.route('/logout')
def logout():
    if current_user.is_authenticated:
        username = current_user.username
        logout_user()
        logger.info(f"User logged out: {username}")
    return redirect(url_for('public.index'))


@user_auth.route('/signup', methods=['GET'])
def signup():
    return render_template('signup.html', title='Sign up', data={}, errors=[])


@user_auth.route('/signup', methods=['POST'])
def signup_submit():
    logger.debug(f"Signup submitted: {sanitize_form_data(request.form)}")

    result = SignupForm.pipeline().run(request.form)
    if not result.is_valid:
        data = dict(result.data, password='')
        return render_template('signup.html', title='Sign up', data=data, errors=result.errors), 400

    form = SignupForm.from_cleaned(result.cleaned)
    user = UserService.create_user(form.name, form.username, form.password)
    if user is None:
        return render_template('error.html', title='Error'), 500

    login_user(user)
    flash(f'Welcome, {user.name}!', 'success')
    return redirect(url_for('user.index'))
