"""
Registration Service
Data access for event sign-ups.
"""

from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from eventsite import db
from eventsite.data.registration import Registration
from eventsite.logger import get_logger

logger = get_logger("eventsite.services.registrations")


class RegistrationService:

    @staticmethod
    def register(event_id: int, name: str, comment: str = '') -> Optional[Registration]:
        """
        Record a sign-up for an event.

        Returns:
            The created Registration, or None if the insert failed
        """
        registration = Registration(event_id=event_id, name=name, comment=comment or '')
        try:
            db.session.add(registration)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to register '{name}' for event {event_id}: {e}")
            return None

        logger.info(f"Registered '{name}' for event {event_id}")
        return registration

    @staticmethod
    def list_registered(event_id: int) -> List[Registration]:
        """Sign-ups for an event, oldest first. Empty list if none."""
        return (Registration.query
                .filter_by(event_id=event_id)
                .order_by(Registration.created_at, Registration.id)
                .all())
