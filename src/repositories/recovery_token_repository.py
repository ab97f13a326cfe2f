"""Recovery token repository."""
import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.errors import NotFoundError, StorageError
from src.models.recovery_token import RecoveryToken
from src.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class RecoveryTokenRepository(BaseRepository[RecoveryToken]):
    """Repository for recovery token operations."""

    UPDATABLE_FIELDS = frozenset({"used", "expires_at", "created_at", "updated_at"})

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        super().__init__(session, RecoveryToken)

    def create(self, user_id: UUID, expires_in: timedelta) -> RecoveryToken:
        """
        Create a new unused recovery token.

        Args:
            user_id: UUID of the owning user
            expires_in: Time to live of the token

        Returns:
            Created RecoveryToken

        Raises:
            StorageError: If the row violates a constraint (e.g. unknown user)
        """
        token = RecoveryToken.build(user_id=user_id, expires_in=expires_in)

        try:
            self._session.add(token)
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            logger.error(f"Failed to create recovery token for user {user_id}: {e}")
            raise StorageError(
                error_location_code="MODEL:RECOVERY:CREATE:STORAGE_ERROR",
            ) from e

        return token

    def find_one_valid_by_user_id(self, user_id: UUID) -> Optional[RecoveryToken]:
        """
        Find the most recently created valid token of a user.

        Args:
            user_id: UUID of the user

        Returns:
            Unused and unexpired RecoveryToken, None if there is none
        """
        return (
            self._session.query(RecoveryToken)
            .filter(
                RecoveryToken.user_id == user_id,
                RecoveryToken.used.is_(False),
                RecoveryToken.expires_at > datetime.utcnow(),
            )
            .order_by(RecoveryToken.created_at.desc(), RecoveryToken.id.desc())
            .first()
        )

    def find_one_by_user_id(self, user_id: UUID) -> Optional[RecoveryToken]:
        """
        Find the most recently created token of a user, valid or not.

        Args:
            user_id: UUID of the user

        Returns:
            RecoveryToken if the user has any, None otherwise
        """
        return (
            self._session.query(RecoveryToken)
            .filter(RecoveryToken.user_id == user_id)
            .order_by(RecoveryToken.created_at.desc(), RecoveryToken.id.desc())
            .first()
        )

    def update(self, token_id: UUID, **patch: Any) -> RecoveryToken:
        """
        Partially update a token.

        Args:
            token_id: UUID of the token
            **patch: Any of used, expires_at, created_at, updated_at

        Returns:
            Updated RecoveryToken

        Raises:
            ValueError: If patch contains a field that cannot be updated
            NotFoundError: If no token has this id
        """
        unknown = set(patch) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        token = self.find_by_id(token_id)
        if not token:
            raise NotFoundError(
                message="O token de recuperação informado não foi encontrado no sistema.",
                action="Verifique se o token informado está correto.",
                error_location_code="MODEL:RECOVERY:UPDATE:NOT_FOUND",
                key="id",
            )

        for field, value in patch.items():
            setattr(token, field, value)
        if "updated_at" not in patch:
            token.updated_at = datetime.utcnow()

        self._session.commit()
        return token
