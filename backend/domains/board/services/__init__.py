from .base import BoardServiceBase
from .thread_service import ThreadService
from .reply_service import ReplyService

__all__ = [
    "BoardServiceBase",
    "ThreadService",
    "ReplyService",
]
