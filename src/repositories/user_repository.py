"""User repository implementation."""
from typing import Optional
from sqlalchemy import func
from src.repositories.base import BaseRepository
from src.models import User


class UserRepository(BaseRepository[User]):
    """Repository for User lookups used by the recovery flow."""

    def __init__(self, session):
        super().__init__(session=session, model=User)

    def find_by_username(self, username: str) -> Optional[User]:
        """Find user by username, ignoring case."""
        return (
            self._session.query(User)
            .filter(func.lower(User.username) == username.lower())
            .first()
        )

    def find_by_email(self, email: str) -> Optional[User]:
        """Find user by email address, ignoring case."""
        return (
            self._session.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )
