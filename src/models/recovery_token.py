"""Recovery token model."""
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from src.extensions import db
from src.models.base import BaseModel


class RecoveryToken(BaseModel):
    """
    Recovery token model.

    Single-use, time-limited credential for resetting one account's
    password. Validity is derived, never stored: a token is valid while it
    is unused and ``expires_at`` lies in the future. Rows are never deleted
    by the recovery flow.
    """

    __tablename__ = "recovery_token"

    user_id = db.Column(
        db.UUID(as_uuid=True),
        db.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    used = db.Column(db.Boolean, nullable=False, default=False)
    expires_at = db.Column(db.DateTime, nullable=False)

    @classmethod
    def build(
        cls,
        user_id: Optional[UUID],
        expires_in: timedelta,
        now: Optional[datetime] = None,
    ) -> "RecoveryToken":
        """
        Build an unsaved token with correctly ordered timestamps.

        Used both for tokens that get persisted and for ephemeral tokens
        returned when there is no account to attach one to.

        Args:
            user_id: Owning user, or None for an ephemeral token
            expires_in: Time to live, must be positive
            now: Creation instant (defaults to current UTC time)

        Returns:
            Transient RecoveryToken
        """
        if expires_in <= timedelta(0):
            raise ValueError("expires_in must be positive")

        now = now or datetime.utcnow()
        return cls(
            id=uuid4(),
            user_id=user_id,
            used=False,
            expires_at=now + expires_in,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_expired(self) -> bool:
        """Check if token has expired."""
        return self.expires_at <= datetime.utcnow()

    @property
    def is_valid(self) -> bool:
        """Check if token is valid (not expired and not used)."""
        return not self.used and not self.is_expired

    def __repr__(self) -> str:
        return f"<RecoveryToken(id={self.id}, user_id={self.user_id}, used={self.used})>"
