from datetime import datetime
from typing import Optional

from backend.domains.board.exceptions import (
    IncorrectPasswordException,
    ReplyNotFoundException,
)
from backend.domains.board.schemas import (
    DELETED_TEXT,
    BoardDocument,
    ReplyCreate,
    ReplyDocument,
    ThreadDocument,
)
from backend.domains.board.services.base import BoardServiceBase, passwords_match
from backend.utils.timestamps import utc_now_iso


class ReplyService(BoardServiceBase):

    def get_thread(self, board_name: str, thread_id: Optional[str]) -> ThreadDocument:
        """The full thread with every reply, unfiltered."""
        return self._read_thread(board_name, thread_id)

    async def create_reply(
        self,
        board_name: str,
        reply_data: ReplyCreate,
        now: Optional[datetime] = None,
    ) -> BoardDocument:
        """Append a reply and bump its thread. Returns the whole board."""
        timestamp = utc_now_iso(now)
        reply = ReplyDocument(
            text=reply_data.text,
            delete_password=reply_data.delete_password,
            created_on=timestamp,
        )

        def operation(uow):
            repo, board, document = self._load_for_update(uow, board_name)
            thread = self._require_thread(document, reply_data.thread_id)
            thread.bumped_on = timestamp
            thread.replies.append(reply)
            repo.save(board, document)
            return document

        document = self._write(board_name, operation)
        self.logger.info(
            "Created reply %s on thread %s (board '%s')",
            reply.id, reply_data.thread_id, board_name,
        )
        return document

    async def report_reply(
        self,
        board_name: str,
        thread_id: str,
        reply_id: str,
        now: Optional[datetime] = None,
    ) -> ReplyDocument:
        timestamp = utc_now_iso(now)

        def operation(uow):
            repo, board, document = self._load_for_update(uow, board_name)
            thread = self._require_thread(document, thread_id)
            reply = thread.find_reply(reply_id)
            if reply is None:
                raise ReplyNotFoundException(f"Reply {reply_id} not found")
            reply.reported = True
            reply.bumped_on = timestamp
            repo.save(board, document)
            return reply

        return self._write(board_name, operation)

    async def delete_reply(
        self,
        board_name: str,
        thread_id: str,
        reply_id: str,
        delete_password: str,
    ) -> ReplyDocument:
        def operation(uow):
            repo, board, document = self._load_for_update(uow, board_name)
            thread = self._require_thread(document, thread_id)
            reply = thread.find_reply(reply_id)
            if reply is None:
                raise ReplyNotFoundException(f"Reply {reply_id} not found")
            if not passwords_match(delete_password, reply.delete_password):
                raise IncorrectPasswordException("incorrect password")
            reply.text = DELETED_TEXT
            repo.save(board, document)
            return reply

        deleted = self._write(board_name, operation)
        self.logger.info("Deleted reply %s on thread %s (board '%s')", reply_id, thread_id, board_name)
        return deleted
