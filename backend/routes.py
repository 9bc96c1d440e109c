"""Consolidated API router for all domain endpoints."""

from fastapi import APIRouter

# Import domain route modules
from backend.domains.board import routes as board

# Create main API router
router = APIRouter(prefix="/api")

# Thread endpoints
router.add_api_route(
    "/threads/{board}",
    board.list_threads,
    methods=["GET"],
    tags=["threads"]
)
router.add_api_route(
    "/threads/{board}",
    board.create_thread,
    methods=["POST"],
    tags=["threads"]
)
router.add_api_route(
    "/threads/{board}",
    board.report_thread,
    methods=["PUT"],
    tags=["threads"]
)
router.add_api_route(
    "/threads/{board}",
    board.delete_thread,
    methods=["DELETE"],
    tags=["threads"]
)

# Reply endpoints
router.add_api_route(
    "/replies/{board}",
    board.get_thread_replies,
    methods=["GET"],
    tags=["replies"]
)
router.add_api_route(
    "/replies/{board}",
    board.create_reply,
    methods=["POST"],
    tags=["replies"]
)
router.add_api_route(
    "/replies/{board}",
    board.report_reply,
    methods=["PUT"],
    tags=["replies"]
)
router.add_api_route(
    "/replies/{board}",
    board.delete_reply,
    methods=["DELETE"],
    tags=["replies"]
)
