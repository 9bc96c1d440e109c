from typing import Callable, Optional

from sqlalchemy.orm import Session


class SqlAlchemyUoW:
    """
    One database transaction around a read-modify-write.

    The session is opened on enter and always closed on exit. An exception
    inside the block rolls the transaction back; otherwise whatever was not
    committed explicitly is committed on the way out.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory
        self.session: Optional[Session] = None
        self.committed = False

    def __enter__(self) -> "SqlAlchemyUoW":
        self.session = self._session_factory()
        self.committed = False
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type:
                self.rollback()
            elif not self.committed:
                try:
                    self.commit()
                except Exception:
                    self.rollback()
                    raise
        finally:
            if self.session:
                self.session.close()
                self.session = None

    def commit(self) -> None:
        """Commit; a lost version race surfaces here as ``StaleDataError``."""
        self.session.commit()
        self.committed = True

    def rollback(self) -> None:
        if self.session:
            self.session.rollback()
        self.committed = False
