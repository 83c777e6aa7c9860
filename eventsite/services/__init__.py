"""
Services Layer
Data access used by routes. Each service wraps one model and hides the ORM.

Services should:
- Return None / empty lists for lookups that find nothing
- Report mutation failures through return values, not exceptions
- Be stateless
"""

from .event_service import EventService
from .user_service import UserService
from .registration_service import RegistrationService

__all__ = [
    'EventService',
    'UserService',
    'RegistrationService',
]
