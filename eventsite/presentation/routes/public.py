"""
Public routes
Event listing, event detail and registration for visitors
"""

from flask import Blueprint, render_template, redirect, url_for, request, abort, current_app
from eventsite.business.context import current_context
from eventsite.business.forms import RegistrationForm
from eventsite.services.event_service import EventService
from eventsite.services.registration_service import RegistrationService
from eventsite.logger import get_logger

bp = Blueprint('public', __name__)
logger = get_logger("eventsite.routes.public")


def _render_event(ctx, event, data=None, errors=None, status=200):
    registered = RegistrationService.list_registered(event.id)
    return render_template('event.html',
                           title=event.name,
                           ctx=ctx,
                           event=event,
                           registered=registered,
                           data=data or {},
                           errors=errors or []), status


@bp.route('/')
def index():
    """Event listing"""
    ctx = current_context()
    page = request.args.get('page', 1, type=int)
    events = EventService.paginate_events(page=page, per_page=current_app.config['EVENTS_PER_PAGE'])

    return render_template('index.html', title='Events', ctx=ctx, events=events)


@bp.route('/<slug>')
def event(slug):
    """Event detail with the registration form"""
    ctx = current_context()
    event = EventService.list_event(slug)
    if event is None:
        abort(404)

    return _render_event(ctx, event)


@bp.route('/<slug>', methods=['POST'])
def register(slug):
    """Register for an event. Logged in visitors register under their account name."""
    ctx = current_context()
    event = EventService.list_event(slug)
    if event is None:
        abort(404)

    result = RegistrationForm.pipeline(require_name=not ctx.is_authenticated).run(request.form)
    if not result.is_valid:
        logger.debug(f"Registration for {slug} rejected: {[e.param for e in result.errors]}")
        return _render_event(ctx, event, data=result.data, errors=result.errors, status=400)

    form = RegistrationForm.from_cleaned(result.cleaned, name=ctx.name)
    registration = RegistrationService.register(event.id, form.name, form.comment)
    if registration is None:
        return render_template('error.html', title='Error', ctx=ctx), 500

    return redirect(url_for('public.thanks', slug=event.slug))


@bp.route('/<slug>/thanks')
def thanks(slug):
    ctx = current_context()
    event = EventService.list_event(slug)
    if event is None:
        abort(404)

    return render_template('registered.html', title='Thank you', ctx=ctx, event=event)
