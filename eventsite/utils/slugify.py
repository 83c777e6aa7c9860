"""
Slug generation for event URLs
"""

import re
import unicodedata
from typing import Callable

# Path segments already taken by fixed routes
RESERVED_SLUGS = frozenset({'admin', 'user', 'static', 'delete', 'login', 'logout', 'signup', 'thanks'})

# Letters that do not decompose under NFKD
_TRANSLITERATIONS = str.maketrans({
    'ð': 'd', 'Ð': 'd',
    'þ': 'th', 'Þ': 'th',
    'æ': 'ae', 'Æ': 'ae',
    'ø': 'o', 'Ø': 'o',
    'ß': 'ss',
    'œ': 'oe', 'Œ': 'oe',
})

_NON_WORD = re.compile(r'[^a-z0-9\s_-]')
_SEPARATORS = re.compile(r'[\s_-]+')


def slugify(value: str) -> str:
    """
    Map a display name to a lowercase, URL-safe identifier.

    Accented letters are folded to ASCII, anything that is not a letter,
    digit, space or hyphen is dropped, and runs of separators become a
    single hyphen.

    >>> slugify('Árshátíð Þróttar 2024!')
    'arshatid-throttar-2024'
    """
    value = (value or '').translate(_TRANSLITERATIONS)
    value = unicodedata.normalize('NFKD', value).encode('ascii', 'ignore').decode('ascii')
    value = _NON_WORD.sub('', value.lower())
    return _SEPARATORS.sub('-', value).strip('-')


def unique_slug(name: str, is_taken: Callable[[str], bool]) -> str:
    """
    Derive a slug from name and suffix it with -2, -3, ... until is_taken
    reports it free. Reserved route words always get a suffix, names with no
    usable characters fall back to 'event'.

    Args:
        name: Display name to derive from
        is_taken: Callable returning True when a slug is already in use

    Returns:
        str: A free slug
    """
    base_slug = slugify(name) or 'event'
    slug = base_slug
    num = 2
    while slug in RESERVED_SLUGS or is_taken(slug):
        slug = f"{base_slug}-{num}"
        num += 1
    return slug
