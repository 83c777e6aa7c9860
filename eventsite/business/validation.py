"""
Form validation and sanitization pipeline

A pipeline runs these stages over a submitted form:

1. Markup stripping on free-text fields. Dangerous elements are dropped with
   their contents, every other tag is reduced to its text. Entity-encoded
   markup is decoded and stripped again.
2. Whitespace trim (passwords excepted), producing the values that get
   persisted.
3. Length rules, measured on those values.
4. Uniqueness lookups against the database. These run even when a length
   rule already failed so one round trip reports every problem.

The raw submitted values are kept alongside so a rejected form can be
re-rendered with what the user typed.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence
from bs4 import BeautifulSoup


# Elements removed together with everything inside them
DROPPED_ELEMENTS = ('script', 'style', 'iframe', 'object', 'embed', 'noscript', 'template')


def _strip_once(value: str) -> str:
    soup = BeautifulSoup(value, 'html.parser')
    for element in soup.find_all(DROPPED_ELEMENTS):
        element.decompose()
    return soup.get_text()


def strip_markup(value: Optional[str]) -> str:
    """
    Remove markup from untrusted text.

    get_text() decodes entities, so '&lt;script&gt;' comes out as a real tag.
    Parsing repeats until the text no longer changes.

    >>> strip_markup('<b>Hi</b> <script>alert(1)</script>there')
    'Hi there'
    >>> strip_markup('&lt;script&gt;alert(1)&lt;/script&gt;')
    ''
    """
    if not value:
        return ''

    while '<' in value or '&' in value:
        stripped = _strip_once(value)
        if stripped == value:
            break
        value = stripped
    return value


def sanitize(value: Optional[str]) -> str:
    """Strip markup and surrounding whitespace"""
    return strip_markup(value).strip()


@dataclass(frozen=True)
class FieldError:
    """A validation failure scoped to one form field"""
    param: str
    msg: str


@dataclass(frozen=True)
class LengthRule:
    field: str
    min_length: int
    max_length: int
    message: str
    # Passwords are measured as typed
    trim: bool = True

    def check(self, value: str) -> Optional[FieldError]:
        measured = value.strip() if self.trim else value
        if self.min_length <= len(measured) <= self.max_length:
            return None
        return FieldError(self.field, self.message)


@dataclass(frozen=True)
class UniqueCheck:
    """
    Application-level uniqueness rule.

    lookup receives the value that would be stored and returns the existing
    entity or None. A match whose id equals exclude_id is the entity being
    updated and does not count.
    """
    field: str
    lookup: Callable[[str], Any]
    message: str

    def check(self, value: str, exclude_id: Optional[int] = None) -> Optional[FieldError]:
        existing = self.lookup(value)
        if existing is None:
            return None
        if exclude_id is not None and getattr(existing, 'id', None) == exclude_id:
            return None
        return FieldError(self.field, self.message)


@dataclass
class ValidationResult:
    errors: List[FieldError] = field(default_factory=list)
    # Values as submitted, for re-rendering the form
    data: Dict[str, str] = field(default_factory=dict)
    # Values after sanitization, for persistence
    cleaned: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_for(self, field_name: str) -> List[str]:
        return [error.msg for error in self.errors if error.param == field_name]


class ValidationPipeline:
    """
    Ordered validation chain for one form.

    Args:
        rules: Length rules, checked in order
        markup_fields: Free-text fields that get markup stripped
        unique_checks: Uniqueness rules, checked after the length rules
        raw_fields: Fields passed through untouched (passwords)
    """

    def __init__(self, rules: Sequence[LengthRule] = (), markup_fields: Iterable[str] = (),
                 unique_checks: Sequence[UniqueCheck] = (), raw_fields: Iterable[str] = ()):
        self.rules = list(rules)
        self.markup_fields = frozenset(markup_fields)
        self.unique_checks = list(unique_checks)
        self.raw_fields = frozenset(raw_fields)

    @property
    def fields(self) -> List[str]:
        names = []
        for name in [r.field for r in self.rules] + [u.field for u in self.unique_checks] + sorted(self.markup_fields):
            if name not in names:
                names.append(name)
        return names

    def run(self, form: Mapping[str, Any], exclude_id: Optional[int] = None) -> ValidationResult:
        """
        Run every stage over form and collect all errors.

        Args:
            form: Submitted values, e.g. request.form
            exclude_id: Id of the entity being updated, ignored by uniqueness checks

        Returns:
            ValidationResult
        """
        data = {name: str(form.get(name) or '') for name in self.fields}

        cleaned = {name: self._clean(name, value) for name, value in data.items()}

        errors = []
        for rule in self.rules:
            error = rule.check(cleaned[rule.field])
            if error is not None:
                errors.append(error)

        for unique in self.unique_checks:
            error = unique.check(cleaned[unique.field], exclude_id=exclude_id)
            if error is not None:
                errors.append(error)

        return ValidationResult(errors=errors, data=data, cleaned=cleaned)

    def _clean(self, name: str, value: str) -> str:
        if name in self.raw_fields:
            return value
        if name in self.markup_fields:
            return sanitize(value)
        return value.strip()
