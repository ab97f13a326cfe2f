"""User session repository."""
from datetime import datetime
from typing import Optional
from src.models.user_session import UserSession
from src.repositories.base import BaseRepository


class SessionRepository(BaseRepository[UserSession]):
    """Read access to browser sessions."""

    def __init__(self, session):
        super().__init__(session, UserSession)

    def find_valid_by_token(self, token: str) -> Optional[UserSession]:
        """Find an unexpired session by its cookie token."""
        return (
            self._session.query(UserSession)
            .filter(
                UserSession.token == token,
                UserSession.expires_at > datetime.utcnow(),
            )
            .first()
        )
