"""User session model."""
from src.extensions import db
from src.models.base import BaseModel


class UserSession(BaseModel):
    """
    Browser session resolved from the ``session_id`` cookie.

    Sessions are created elsewhere; the recovery API only reads them.
    """

    __tablename__ = "user_session"

    token = db.Column(db.String(96), unique=True, nullable=False, index=True)
    user_id = db.Column(
        db.UUID(as_uuid=True),
        db.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = db.Column(db.DateTime, nullable=False)

    # Relationship
    user = db.relationship("User", lazy="joined")

    def __repr__(self) -> str:
        return f"<UserSession(id={self.id}, user_id={self.user_id})>"
