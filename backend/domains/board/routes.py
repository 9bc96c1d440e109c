"""Message board API routes - thin routing layer.

Every outcome is answered with HTTP 200. Lookups that come up empty answer
with a JSON ``{"error": ...}`` body, state changes answer with a bare text
status, and the messages differ per endpoint.
"""

from typing import Optional, Type, TypeVar

from fastapi import Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException
from sqlalchemy.orm import Session

from backend.config.db import get_db
from backend.domains.board.exceptions import (
    BoardNotFoundException,
    IncorrectPasswordException,
    InvalidPayloadException,
    PersistenceException,
    ReplyNotFoundException,
    ThreadNotFoundException,
)
from backend.domains.board.schemas import (
    ReplyCreate,
    ReplyDelete,
    ReplyReport,
    ThreadCreate,
    ThreadDelete,
    ThreadReport,
)
from backend.domains.board.services import ReplyService, ThreadService

P = TypeVar("P", bound=BaseModel)

NO_BOARD = "No board with this name"
BOARD_NOT_FOUND = "Board not found"
THREAD_NOT_FOUND = "Thread not found"
REPLY_NOT_FOUND = "Reply not found"

REPORTED = "reported"
SUCCESS = "success"
INCORRECT_PASSWORD = "incorrect password"

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_thread_service(db: Session = Depends(get_db)) -> ThreadService:
    """Dependency to get thread service."""
    return ThreadService(db)


def get_reply_service(db: Session = Depends(get_db)) -> ReplyService:
    """Dependency to get reply service."""
    return ReplyService(db)


def error_response(message: str) -> JSONResponse:
    return JSONResponse({"error": message})


async def read_payload(request: Request) -> dict:
    """Request body as a flat dict, from JSON or form data."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            form = await request.form()
        except HTTPException:
            # Unparseable multipart body
            return {}
        return {key: value for key, value in form.items() if isinstance(value, str)}
    return {}


async def parse_payload(request: Request, model: Type[P]) -> P:
    payload = await read_payload(request)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise InvalidPayloadException(
            f"Missing or invalid field(s): {', '.join(fields)}"
        )


# --- Threads ---
async def list_threads(
    board: str,
    service: ThreadService = Depends(get_thread_service),
):
    """The ten most recently bumped threads with three replies each."""
    try:
        threads = service.list_threads(board)
    except BoardNotFoundException:
        return error_response(NO_BOARD)
    except PersistenceException:
        return error_response("There was an error fetching threads")
    return JSONResponse([thread.to_wire() for thread in threads])


async def create_thread(
    board: str,
    request: Request,
    service: ThreadService = Depends(get_thread_service),
):
    """Create a thread; a board named in the body wins over the path."""
    try:
        thread_data = await parse_payload(request, ThreadCreate)
    except InvalidPayloadException as e:
        return error_response(e.detail)

    try:
        thread = await service.create_thread(thread_data.board or board, thread_data)
    except PersistenceException:
        return PlainTextResponse("There was an error saving in post")
    return JSONResponse(thread.to_wire())


async def report_thread(
    board: str,
    request: Request,
    service: ThreadService = Depends(get_thread_service),
):
    try:
        report = await parse_payload(request, ThreadReport)
        await service.report_thread(board, report.report_id)
    except InvalidPayloadException as e:
        return error_response(e.detail)
    except BoardNotFoundException:
        return error_response(BOARD_NOT_FOUND)
    except ThreadNotFoundException:
        return error_response(THREAD_NOT_FOUND)
    except PersistenceException:
        return error_response("There was an error reporting the thread")
    return PlainTextResponse(REPORTED)


async def delete_thread(
    board: str,
    request: Request,
    service: ThreadService = Depends(get_thread_service),
):
    try:
        deletion = await parse_payload(request, ThreadDelete)
        await service.delete_thread(board, deletion.thread_id, deletion.delete_password)
    except InvalidPayloadException as e:
        return error_response(e.detail)
    except BoardNotFoundException:
        return error_response(BOARD_NOT_FOUND)
    except ThreadNotFoundException:
        return error_response(THREAD_NOT_FOUND)
    except IncorrectPasswordException:
        return PlainTextResponse(INCORRECT_PASSWORD)
    except PersistenceException:
        return error_response("There was an error deleting the thread")
    return PlainTextResponse(SUCCESS)


# --- Replies ---
async def create_reply(
    board: str,
    request: Request,
    service: ReplyService = Depends(get_reply_service),
):
    """Add a reply to a thread; answers with the whole board document."""
    try:
        reply_data = await parse_payload(request, ReplyCreate)
        document = await service.create_reply(board, reply_data)
    except InvalidPayloadException as e:
        return error_response(e.detail)
    except BoardNotFoundException:
        return error_response(BOARD_NOT_FOUND)
    except ThreadNotFoundException:
        return error_response(THREAD_NOT_FOUND)
    except PersistenceException:
        return error_response("There was an error adding the reply")
    return JSONResponse(document.to_wire())


async def get_thread_replies(
    board: str,
    thread_id: Optional[str] = Query(None),
    service: ReplyService = Depends(get_reply_service),
):
    """A single thread with all of its replies in full."""
    try:
        thread = service.get_thread(board, thread_id)
    except BoardNotFoundException:
        return error_response(NO_BOARD)
    except ThreadNotFoundException:
        return error_response(THREAD_NOT_FOUND)
    except PersistenceException:
        return error_response("There was an error fetching the reply")
    return JSONResponse(thread.to_wire())


async def report_reply(
    board: str,
    request: Request,
    service: ReplyService = Depends(get_reply_service),
):
    try:
        report = await parse_payload(request, ReplyReport)
        await service.report_reply(board, report.thread_id, report.reply_id)
    except InvalidPayloadException as e:
        return error_response(e.detail)
    except BoardNotFoundException:
        return error_response(NO_BOARD)
    except ThreadNotFoundException:
        return error_response(THREAD_NOT_FOUND)
    except ReplyNotFoundException:
        return error_response(REPLY_NOT_FOUND)
    except PersistenceException:
        return error_response("There was an error reporting the reply")
    return PlainTextResponse(REPORTED)


async def delete_reply(
    board: str,
    request: Request,
    service: ReplyService = Depends(get_reply_service),
):
    try:
        deletion = await parse_payload(request, ReplyDelete)
        await service.delete_reply(
            board, deletion.thread_id, deletion.reply_id, deletion.delete_password
        )
    except InvalidPayloadException as e:
        return error_response(e.detail)
    except BoardNotFoundException:
        return error_response(NO_BOARD)
    except ThreadNotFoundException:
        return error_response(THREAD_NOT_FOUND)
    except ReplyNotFoundException:
        return error_response(REPLY_NOT_FOUND)
    except IncorrectPasswordException:
        return PlainTextResponse(INCORRECT_PASSWORD)
    except PersistenceException:
        return error_response("There was an error deleting the reply")
    return PlainTextResponse(SUCCESS)
