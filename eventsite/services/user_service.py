"""
User Service
Data access for user accounts.
"""

from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from eventsite import db
from eventsite.data.user import User
from eventsite.logger import get_logger

logger = get_logger("eventsite.services.users")


class UserService:

    @staticmethod
    def find_by_username(username: Optional[str]) -> Optional[User]:
        if not username:
            return None
        return User.query.filter_by(username=username).first()

    @staticmethod
    def find_by_id(user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    @staticmethod
    def is_admin(username: Optional[str]) -> bool:
        user = UserService.find_by_username(username)
        return bool(user and user.is_admin)

    @staticmethod
    def create_user(name: str, username: str, password: str,
                    is_admin: bool = False, can_manage_events: bool = True) -> Optional[User]:
        """
        Create an account with a hashed password.

        Args:
            name: Display name
            username: Login name, unique
            password: Plain text password, hashed before storage
            is_admin: Grant the admin capability
            can_manage_events: Grant the event management capability

        Returns:
            The created User, or None if the insert failed
        """
        user = User(
            name=name,
            username=username,
            is_admin=is_admin,
            can_manage_events=can_manage_events,
        )
        user.set_password(password)
        try:
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to create user '{username}': {e}")
            return None

        logger.info(f"Created user {user.id} ({username})")
        return user
