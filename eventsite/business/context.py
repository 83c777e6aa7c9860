"""
Request-scoped identity passed explicitly into route handlers
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional
from flask_login import current_user


@dataclass(frozen=True)
class RequestContext:
    is_authenticated: bool = False
    user_id: Optional[int] = None
    username: Optional[str] = None
    name: Optional[str] = None
    capabilities: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return 'admin' in self.capabilities

    def can(self, capability: str) -> bool:
        return capability in self.capabilities

    @classmethod
    def anonymous(cls) -> 'RequestContext':
        return cls()

    @classmethod
    def from_user(cls, user) -> 'RequestContext':
        if user is None or not getattr(user, 'is_authenticated', False):
            return cls.anonymous()
        return cls(
            is_authenticated=True,
            user_id=user.id,
            username=user.username,
            name=user.name,
            capabilities=user.capabilities,
        )


def current_context() -> RequestContext:
    """Build the context for the request being served"""
    return RequestContext.from_user(current_user)
