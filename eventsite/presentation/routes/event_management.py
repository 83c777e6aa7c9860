"""
Event management routes
One handler set, instantiated per role (admin, event manager)
"""

from dataclasses import dataclass
from typing import Tuple
from flask import Blueprint, render_template, redirect, url_for, request, abort, current_app
from flask_login import logout_user
from eventsite.auth import login_required, capability_required
from eventsite.business.context import current_context
from eventsite.business.forms import EventForm, EVENT_FIELDS
from eventsite.services.event_service import EventService
from eventsite.logger import get_logger


@dataclass(frozen=True)
class ManagementRole:
    """
    What differs between management areas.

    Attributes:
        name: Blueprint name, also used in endpoint names
        capability: Capability the session must carry
        template_prefix: Template directory holding index.html and event.html
        title: Page title stem
        field_set: Editable event fields
        can_delete: Whether POST /delete is registered
        has_logout: Whether GET /logout is registered under the prefix
    """
    name: str
    capability: str
    template_prefix: str
    title: str
    field_set: Tuple[str, ...] = EVENT_FIELDS
    can_delete: bool = False
    has_logout: bool = False


ADMIN_ROLE = ManagementRole(
    name='admin',
    capability='admin',
    template_prefix='admin',
    title='Events - administration',
    can_delete=True,
    has_logout=True,
)

EVENT_MANAGER_ROLE = ManagementRole(
    name='user',
    capability='manage_events',
    template_prefix='user',
    title='Events - management',
)


def create_event_management_blueprint(role: ManagementRole) -> Blueprint:
    """
    Build the listing, create, edit, update and (optionally) delete routes for a role.

    Args:
        role: ManagementRole describing the area

    Returns:
        Blueprint: Unregistered blueprint named role.name
    """
    bp = Blueprint(role.name, __name__)
    logger = get_logger(f"eventsite.routes.{role.name}")

    def gate(f):
        return login_required(capability_required(role.capability)(f))

    def listing_url():
        return url_for(f'{role.name}.index')

    def render_index(ctx, data=None, errors=None, status=200):
        page = request.args.get('page', 1, type=int)
        events = EventService.paginate_events(page=page, per_page=current_app.config['EVENTS_PER_PAGE'])
        return render_template(f'{role.template_prefix}/index.html',
                               title=role.title,
                               ctx=ctx,
                               role=role,
                               events=events,
                               data=data or {},
                               errors=errors or []), status

    def render_event(ctx, event, data, errors=None, status=200):
        return render_template(f'{role.template_prefix}/event.html',
                               title=f'{event.name} - {role.title}',
                               ctx=ctx,
                               role=role,
                               event=event,
                               data=data,
                               errors=errors or []), status

    def render_error(ctx):
        return render_template('error.html', title='Error', ctx=ctx), 500

    @gate
    def index():
        return render_index(current_context())

    @gate
    def create():
        ctx = current_context()
        result = EventForm.pipeline(role.field_set).run(request.form)
        if not result.is_valid:
            logger.debug(f"{ctx.username} create rejected: {[e.param for e in result.errors]}")
            return render_index(ctx, data=result.data, errors=result.errors, status=400)

        form = EventForm.from_cleaned(result.cleaned)
        event = EventService.create_event(form.name, form.description, created_by_id=ctx.user_id)
        if event is None:
            return render_error(ctx)

        logger.info(f"{ctx.username} created event {event.slug}")
        return redirect(listing_url())

    @gate
    def event(slug):
        ctx = current_context()
        event = EventService.list_event(slug)
        if event is None:
            abort(404)

        data = {'name': event.name, 'description': event.description}
        return render_event(ctx, event, data)

    @gate
    def update(slug):
        ctx = current_context()
        event = EventService.list_event(slug)
        if event is None:
            abort(404)

        result = EventForm.pipeline(role.field_set).run(request.form, exclude_id=event.id)
        if not result.is_valid:
            logger.debug(f"{ctx.username} update of {slug} rejected: {[e.param for e in result.errors]}")
            return render_event(ctx, event, result.data, errors=result.errors, status=400)

        # Fields outside the role's field set keep their stored values
        description = result.cleaned['description'] if 'description' in role.field_set else event.description
        form = EventForm(name=result.cleaned['name'], description=description)
        if not EventService.update_event(event.id, form.name, form.description):
            return render_error(ctx)

        logger.info(f"{ctx.username} updated event {event.id}")
        return redirect(listing_url())

    @gate
    def delete():
        ctx = current_context()
        slug = request.args.get('slug') or request.form.get('slug')
        event = EventService.list_event(slug) if slug else None
        if event is None:
            abort(404)

        if not EventService.delete_event(event.id):
            return render_error(ctx)

        logger.info(f"{ctx.username} deleted event {slug}")
        return redirect(listing_url())

    def logout():
        logout_user()
        return redirect(url_for('public.index'))

    bp.add_url_rule('', 'index', index, methods=['GET'])
    bp.add_url_rule('', 'create', create, methods=['POST'])
    if role.can_delete:
        bp.add_url_rule('/delete', 'delete', delete, methods=['POST'])
    if role.has_logout:
        bp.add_url_rule('/logout', 'logout', logout, methods=['GET'])
    bp.add_url_rule('/<slug>', 'event', event, methods=['GET'])
    bp.add_url_rule('/<slug>', 'update', update, methods=['POST'])

    return bp
