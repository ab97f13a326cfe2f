"""Generic repository base."""
from typing import Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.orm import Session

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """Common persistence operations shared by all repositories."""

    def __init__(self, session: Session, model: Type[ModelType]):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy session
            model: Mapped model class handled by this repository
        """
        self._session = session
        self._model = model

    def find_by_id(self, id: UUID) -> Optional[ModelType]:
        """Find entity by primary key."""
        return self._session.get(self._model, id)

    def save(self, entity: ModelType) -> ModelType:
        """Add or update entity and commit."""
        self._session.add(entity)
        self._session.commit()
        return entity
