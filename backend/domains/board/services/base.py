import secrets
from typing import Callable, Optional, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.config.settings import Settings, get_settings
from backend.domains.board.exceptions import (
    BoardNotFoundException,
    PersistenceException,
    ThreadNotFoundException,
)
from backend.domains.board.models import Board
from backend.domains.board.repository import SqlAlchemyBoardRepository
from backend.domains.board.schemas import BoardDocument, ThreadDocument
from backend.domains.shared.service_base import DomainServiceBase
from backend.domains.shared.uow import SqlAlchemyUoW

T = TypeVar('T')


def passwords_match(given: str, stored: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), stored.encode("utf-8"))


class BoardServiceBase(DomainServiceBase):
    """Shared board lookups and the read-modify-write cycle."""

    def __init__(self, session: Session, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        super().__init__(session, conflict_retries=self.settings.save_conflict_retries)
        self.board_repo = SqlAlchemyBoardRepository(session)

    def _read_board(self, board_name: str) -> BoardDocument:
        try:
            board = self.board_repo.get_by_name(board_name)
        except SQLAlchemyError as e:
            self.logger.exception("Failed to load board '%s'", board_name)
            raise PersistenceException(f"Could not load board '{board_name}'") from e
        if board is None:
            raise BoardNotFoundException(f"Board '{board_name}' not found")
        return BoardDocument.from_model(board)

    def _read_thread(self, board_name: str, thread_id: Optional[str]) -> ThreadDocument:
        document = self._read_board(board_name)
        thread = document.find_thread(thread_id)
        if thread is None:
            raise ThreadNotFoundException(f"Thread {thread_id} not found")
        return thread

    @staticmethod
    def _load_for_update(
        uow: SqlAlchemyUoW, board_name: str
    ) -> Tuple[SqlAlchemyBoardRepository, Board, BoardDocument]:
        repo = SqlAlchemyBoardRepository(uow.session)
        board = repo.get_by_name(board_name)
        if board is None:
            raise BoardNotFoundException(f"Board '{board_name}' not found")
        return repo, board, BoardDocument.from_model(board)

    @staticmethod
    def _require_thread(document: BoardDocument, thread_id: Optional[str]) -> ThreadDocument:
        thread = document.find_thread(thread_id)
        if thread is None:
            raise ThreadNotFoundException(f"Thread {thread_id} not found")
        return thread

    def _write(self, board_name: str, operation: Callable[[SqlAlchemyUoW], T]) -> T:
        try:
            return self.run_in_unit_of_work(operation)
        except SQLAlchemyError as e:
            self.logger.exception("Failed to save board '%s'", board_name)
            raise PersistenceException(f"Could not save board '{board_name}'") from e
