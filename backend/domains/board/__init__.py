from .repository import (
    BoardRepository,
    SqlAlchemyBoardRepository,
)
from .services import ThreadService, ReplyService

__all__ = [
    # Repository
    "BoardRepository",
    "SqlAlchemyBoardRepository",
    # Services
    "ThreadService",
    "ReplyService",
]
