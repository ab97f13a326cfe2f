"""User domain model."""
from src.extensions import db
from src.models.base import BaseModel

NUKED_FEATURE = "nuked"


class User(BaseModel):
    """
    User account model.

    Only the fields the recovery flow reads are mapped here. Capabilities
    are plain strings in ``features`` (e.g. "create:recovery_token:username").
    A user holding the "nuked" feature has been deactivated and must look
    absent to every external caller.
    """

    __tablename__ = "user"

    username = db.Column(db.String(30), unique=True, nullable=False, index=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    features = db.Column(db.JSON, nullable=False, default=list)

    def has_feature(self, feature: str) -> bool:
        """Check if the user holds a capability flag."""
        return feature in (self.features or [])

    @property
    def is_nuked(self) -> bool:
        """Check if the account was nuked."""
        return self.has_feature(NUKED_FEATURE)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
