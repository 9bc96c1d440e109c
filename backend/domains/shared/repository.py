from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

T = TypeVar('T')


class SqlAlchemyRepository(Generic[T]):
    """Primary-key access shared by the SQLAlchemy repositories."""

    def __init__(self, session: Session, model_class: Type[T]):
        """
        Args:
            session: Session the repository reads and flushes through
            model_class: Mapped class the repository owns
        """
        self.session = session
        self.model_class = model_class

    def get(self, id: Any) -> Optional[T]:
        """Get an entity by its primary key."""
        return self.session.get(self.model_class, id)

    def add(self, entity: T) -> T:
        """Stage a new entity and flush so key collisions surface immediately."""
        self.session.add(entity)
        self.session.flush()
        return entity
