"""
Event Service
Data access for events.

Handles:
- Listing and paginating events for the public and management views
- Lookups by slug, name and id
- Create / update / delete with slug derivation
"""

from typing import List, Optional
from flask_sqlalchemy.pagination import Pagination
from sqlalchemy.exc import SQLAlchemyError
from eventsite import db
from eventsite.data.event import Event
from eventsite.utils.slugify import unique_slug
from eventsite.logger import get_logger

logger = get_logger("eventsite.services.events")


class EventService:
    """
    Service for event persistence.

    Mutating methods never raise on database errors: they log, roll back
    and report failure through their return value.
    """

    @staticmethod
    def list_events() -> List[Event]:
        """All events, oldest first"""
        return Event.query.order_by(Event.created_at, Event.id).all()

    @staticmethod
    def paginate_events(page: int = 1, per_page: int = 10) -> Pagination:
        """
        Get one page of events, oldest first.

        Args:
            page: Page number, 1-based. Out of range pages are empty, not errors.
            per_page: Items per page

        Returns:
            Pagination object
        """
        query = Event.query.order_by(Event.created_at, Event.id)
        return query.paginate(page=max(page, 1), per_page=per_page, error_out=False)

    @staticmethod
    def list_event(slug: str) -> Optional[Event]:
        """Event by slug, or None"""
        return Event.query.filter_by(slug=slug).first()

    @staticmethod
    def list_event_by_name(name: str) -> Optional[Event]:
        """Event by exact name, or None"""
        return Event.query.filter_by(name=name).first()

    @staticmethod
    def list_event_by_id(event_id: int) -> Optional[Event]:
        return db.session.get(Event, event_id)

    @staticmethod
    def slug_for(name: str, event_id: Optional[int] = None) -> str:
        """
        Derive a free slug for name. A slug already held by event_id counts as free,
        so renaming an event to the same name keeps its slug.
        """
        def is_taken(slug):
            existing = Event.query.filter_by(slug=slug).first()
            return existing is not None and existing.id != event_id

        return unique_slug(name, is_taken)

    @staticmethod
    def create_event(name: str, description: str = '', created_by_id: Optional[int] = None) -> Optional[Event]:
        """
        Create an event, deriving its slug from name.

        Returns:
            The created Event, or None if the insert failed
        """
        event = Event(
            name=name,
            slug=EventService.slug_for(name),
            description=description or '',
            created_by_id=created_by_id,
        )
        try:
            db.session.add(event)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to create event '{name}': {e}")
            return None

        logger.info(f"Created event {event.id} ({event.slug})")
        return event

    @staticmethod
    def update_event(event_id: int, name: str, description: str = '') -> bool:
        """
        Update name and description, re-deriving the slug from the new name.

        Returns:
            bool: True if the event was updated
        """
        event = db.session.get(Event, event_id)
        if event is None:
            logger.warning(f"Update requested for missing event {event_id}")
            return False

        try:
            # Slug lookup runs before the entity is dirty so it cannot autoflush
            slug = EventService.slug_for(name, event_id=event.id)
            event.name = name
            event.slug = slug
            event.description = description or ''
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to update event {event_id}: {e}")
            return False

        logger.info(f"Updated event {event.id} ({event.slug})")
        return True

    @staticmethod
    def delete_event(event_id: int) -> bool:
        """
        Delete an event and its registrations.

        Returns:
            bool: True if the event was deleted
        """
        event = db.session.get(Event, event_id)
        if event is None:
            logger.warning(f"Delete requested for missing event {event_id}")
            return False

        try:
            db.session.delete(event)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to delete event {event_id}: {e}")
            return False

        logger.info(f"Deleted event {event_id}")
        return True
