from typing import Protocol, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from backend.domains.board.models import Board
from backend.domains.board.schemas import BoardDocument
from backend.domains.shared.repository import SqlAlchemyRepository


class BoardRepository(Protocol):
    """Protocol for Board repository operations."""

    def get_by_name(self, name: str) -> Optional[Board]:
        """Get a board by its unique name."""
        ...

    def create(self, document: BoardDocument) -> Board:
        """Insert a new board from its document."""
        ...

    def save(self, board: Board, document: BoardDocument) -> Board:
        """Write the document's threads back onto the board row."""
        ...


class SqlAlchemyBoardRepository(SqlAlchemyRepository[Board]):
    """SQLAlchemy implementation of BoardRepository."""

    def __init__(self, session: Session):
        """Initialize with a SQLAlchemy session."""
        super().__init__(session, Board)

    def get_by_name(self, name: str) -> Optional[Board]:
        """Get a board by its unique name, refreshing any copy already loaded."""
        return (
            self.session.query(Board)
            .filter(Board.name == name)
            .populate_existing()
            .first()
        )

    def create(self, document: BoardDocument) -> Board:
        """Insert a new board from its document."""
        board = Board(
            id=document.id,
            name=document.name,
            threads=document.threads_for_storage(),
        )
        return self.add(board)

    def save(self, board: Board, document: BoardDocument) -> Board:
        """
        Whole-document save.

        The embedded threads are replaced wholesale and the row is flagged
        dirty even when the JSON compares equal, so the version check always
        runs. A concurrent writer shows up as ``StaleDataError`` on flush.
        """
        board.threads = document.threads_for_storage()
        flag_modified(board, "threads")
        self.session.flush()
        return board
