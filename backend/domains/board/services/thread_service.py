from datetime import datetime
from typing import List, Optional

from backend.domains.board.exceptions import IncorrectPasswordException
from backend.domains.board.schemas import (
    DELETED_TEXT,
    BoardDocument,
    ThreadCreate,
    ThreadDocument,
    ThreadSummary,
)
from backend.domains.board.repository import SqlAlchemyBoardRepository
from backend.domains.board.services.base import BoardServiceBase, passwords_match
from backend.utils.timestamps import utc_now_iso


class ThreadService(BoardServiceBase):

    def list_threads(self, board_name: str) -> List[ThreadSummary]:
        """Most recently bumped threads, each with a short reply preview."""
        document = self._read_board(board_name)
        return [
            ThreadSummary.from_document(thread, self.settings.reply_preview_limit)
            for thread in document.most_recent_threads(self.settings.thread_list_limit)
        ]

    async def create_thread(
        self,
        board_name: str,
        thread_data: ThreadCreate,
        now: Optional[datetime] = None,
    ) -> ThreadDocument:
        """Append a new thread, creating the board on its first thread."""
        timestamp = utc_now_iso(now)
        thread = ThreadDocument(
            text=thread_data.text,
            delete_password=thread_data.delete_password,
            created_on=timestamp,
            bumped_on=timestamp,
            replies=[],
        )

        def operation(uow):
            repo = SqlAlchemyBoardRepository(uow.session)
            board = repo.get_by_name(board_name)
            if board is None:
                repo.create(BoardDocument(name=board_name, threads=[thread]))
                self.logger.info("Created board '%s'", board_name)
                return thread
            document = BoardDocument.from_model(board)
            document.threads.append(thread)
            repo.save(board, document)
            return thread

        created = self._write(board_name, operation)
        self.logger.info("Created thread %s on board '%s'", created.id, board_name)
        return created

    async def report_thread(
        self,
        board_name: str,
        thread_id: str,
        now: Optional[datetime] = None,
    ) -> ThreadDocument:
        timestamp = utc_now_iso(now)

        def operation(uow):
            repo, board, document = self._load_for_update(uow, board_name)
            thread = self._require_thread(document, thread_id)
            thread.reported = True
            thread.bumped_on = timestamp
            repo.save(board, document)
            return thread

        return self._write(board_name, operation)

    async def delete_thread(self, board_name: str, thread_id: str, delete_password: str) -> ThreadDocument:
        """Soft delete: the thread keeps its replies and password, only the text goes."""

        def operation(uow):
            repo, board, document = self._load_for_update(uow, board_name)
            thread = self._require_thread(document, thread_id)
            if not passwords_match(delete_password, thread.delete_password):
                raise IncorrectPasswordException("incorrect password")
            thread.text = DELETED_TEXT
            repo.save(board, document)
            return thread

        deleted = self._write(board_name, operation)
        self.logger.info("Deleted thread %s on board '%s'", thread_id, board_name)
        return deleted
