"""Base model with common columns."""
from datetime import datetime
from uuid import uuid4

from src.extensions import db


class BaseModel(db.Model):
    """
    Abstract base for all tables.

    Provides a client-generated UUID primary key and naive UTC
    created_at / updated_at timestamps.
    """

    __abstract__ = True

    id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid4)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )
