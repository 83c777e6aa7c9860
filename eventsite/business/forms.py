"""
Request DTOs and the validation pipeline behind each form

Each form class names the fields it carries, builds the pipeline that
validates them, and is constructed only from a pipeline's cleaned values.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping
from eventsite.business.validation import LengthRule, UniqueCheck, ValidationPipeline
from eventsite.services.event_service import EventService
from eventsite.services.user_service import UserService

NAME_MAX = 64
TEXT_MAX = 400
USERNAME_MAX = 64
PASSWORD_MIN = 6
PASSWORD_MAX = 256

EVENT_FIELDS = ('name', 'description')


@dataclass(frozen=True)
class EventForm:
    name: str
    description: str = ''

    @staticmethod
    def pipeline(field_set: Iterable[str] = EVENT_FIELDS) -> ValidationPipeline:
        """
        Pipeline for creating or updating an event.

        Args:
            field_set: Editable fields. The name is always validated.
        """
        field_set = set(field_set) | {'name'}
        rules = [LengthRule('name', 1, NAME_MAX, f'Name is required, at most {NAME_MAX} characters.')]
        if 'description' in field_set:
            rules.append(LengthRule('description', 0, TEXT_MAX,
                                    f'Description can be at most {TEXT_MAX} characters.'))
        return ValidationPipeline(
            rules=rules,
            markup_fields=field_set & set(EVENT_FIELDS),
            unique_checks=[UniqueCheck('name', EventService.list_event_by_name,
                                       'An event with this name already exists.')],
        )

    @classmethod
    def from_cleaned(cls, cleaned: Mapping[str, str]) -> 'EventForm':
        return cls(name=cleaned['name'], description=cleaned.get('description', ''))


@dataclass(frozen=True)
class RegistrationForm:
    name: str
    comment: str = ''

    @staticmethod
    def pipeline(require_name: bool = True) -> ValidationPipeline:
        """
        Pipeline for signing up to an event.

        Args:
            require_name: False when the registrant is logged in and their
                account name is used instead of a submitted one
        """
        rules = []
        markup_fields = ['comment']
        if require_name:
            rules.append(LengthRule('name', 1, NAME_MAX, f'Name is required, at most {NAME_MAX} characters.'))
            markup_fields.append('name')
        rules.append(LengthRule('comment', 0, TEXT_MAX, f'Comment can be at most {TEXT_MAX} characters.'))
        return ValidationPipeline(rules=rules, markup_fields=markup_fields)

    @classmethod
    def from_cleaned(cls, cleaned: Mapping[str, str], name: str = None) -> 'RegistrationForm':
        return cls(name=name or cleaned['name'], comment=cleaned.get('comment', ''))


@dataclass(frozen=True)
class SignupForm:
    name: str
    username: str
    password: str

    @staticmethod
    def pipeline() -> ValidationPipeline:
        return ValidationPipeline(
            rules=[
                LengthRule('name', 1, NAME_MAX, f'Name is required, at most {NAME_MAX} characters.'),
                LengthRule('username', 1, USERNAME_MAX,
                           f'Username is required, at most {USERNAME_MAX} characters.'),
                LengthRule('password', PASSWORD_MIN, PASSWORD_MAX,
                           f'Password must be at least {PASSWORD_MIN} characters.', trim=False),
            ],
            markup_fields=['name'],
            unique_checks=[UniqueCheck('username', UserService.find_by_username,
                                       'Username is already taken.')],
            raw_fields=['password'],
        )

    @classmethod
    def from_cleaned(cls, cleaned: Mapping[str, str]) -> 'SignupForm':
        return cls(name=cleaned['name'], username=cleaned['username'], password=cleaned['password'])


@dataclass(frozen=True)
class LoginForm:
    username: str
    password: str

    @classmethod
    def from_request(cls, form: Mapping[str, str]) -> 'LoginForm':
        return cls(username=(form.get('username') or '').strip(), password=form.get('password') or '')

    @property
    def is_complete(self) -> bool:
        return bool(self.username and self.password)
