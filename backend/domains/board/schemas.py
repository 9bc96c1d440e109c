"""Message board domain schemas.

Stored documents, the trimmed listing views and the request payloads.
Document identifiers travel under ``_id`` on the wire and in storage.
"""

from __future__ import annotations

import uuid
from typing import List, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from backend.utils.timestamps import parse_iso

if TYPE_CHECKING:
    from backend.domains.board.models import Board

DELETED_TEXT = "[deleted]"


def new_document_id() -> str:
    return uuid.uuid4().hex


class DocumentBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_document_id, alias="_id")

    def to_wire(self) -> dict:
        """Serialize with ``_id`` keys, leaving out unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


# --- Stored documents ---
class ReplyDocument(DocumentBase):
    text: str
    delete_password: str
    created_on: str
    reported: bool = False
    # Set only when the reply is reported.
    bumped_on: Optional[str] = None


class ThreadDocument(DocumentBase):
    text: str
    delete_password: str
    created_on: str
    bumped_on: str
    reported: bool = False
    replies: List[ReplyDocument] = []

    def find_reply(self, reply_id: Optional[str]) -> Optional[ReplyDocument]:
        if not reply_id:
            return None
        for reply in self.replies:
            if reply.id == reply_id:
                return reply
        return None


class BoardDocument(DocumentBase):
    name: str
    threads: List[ThreadDocument] = []

    @classmethod
    def from_model(cls, board: "Board") -> "BoardDocument":
        return cls.model_validate(
            {"_id": board.id, "name": board.name, "threads": board.threads or []}
        )

    def find_thread(self, thread_id: Optional[str]) -> Optional[ThreadDocument]:
        if not thread_id:
            return None
        for thread in self.threads:
            if thread.id == thread_id:
                return thread
        return None

    def threads_for_storage(self) -> list[dict]:
        return [thread.to_wire() for thread in self.threads]

    def most_recent_threads(self, limit: int) -> List[ThreadDocument]:
        """Threads ordered by ``bumped_on`` descending, cut to ``limit``."""
        ordered = sorted(
            self.threads,
            key=lambda thread: parse_iso(thread.bumped_on),
            reverse=True,
        )
        return ordered[:limit]


# --- Listing views ---
class ReplySummary(DocumentBase):
    """Reply as shown in the board listing: no password, no report flag."""
    text: str
    created_on: str


class ThreadSummary(DocumentBase):
    text: str
    created_on: str
    bumped_on: str
    replies: List[ReplySummary] = []
    replycount: int = 0

    @classmethod
    def from_document(cls, thread: ThreadDocument, reply_limit: int) -> "ThreadSummary":
        return cls(
            id=thread.id,
            text=thread.text,
            created_on=thread.created_on,
            bumped_on=thread.bumped_on,
            replies=[
                ReplySummary(id=reply.id, text=reply.text, created_on=reply.created_on)
                for reply in thread.replies[:reply_limit]
            ],
            replycount=len(thread.replies),
        )


# --- Request payloads ---
class ThreadCreate(BaseModel):
    text: str
    delete_password: str
    board: Optional[str] = None


class ThreadReport(BaseModel):
    report_id: str


class ThreadDelete(BaseModel):
    thread_id: str
    delete_password: str


class ReplyCreate(BaseModel):
    thread_id: str
    text: str
    delete_password: str


class ReplyReport(BaseModel):
    thread_id: str
    reply_id: str


class ReplyDelete(BaseModel):
    thread_id: str
    reply_id: str
    delete_password: str
