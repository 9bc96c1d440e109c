from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.domains.board.models import Board
from backend.domains.board.repository import SqlAlchemyBoardRepository
from backend.domains.board.schemas import BoardDocument, ReplyDocument, ThreadDocument
from backend.utils.timestamps import to_iso

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def seed_board(db_session: Session, name: str, threads: list) -> Board:
    """Insert a board document directly, bypassing the API."""
    board = SqlAlchemyBoardRepository(db_session).create(BoardDocument(name=name, threads=threads))
    db_session.commit()
    return board


def make_thread_document(index: int, reply_count: int = 0) -> ThreadDocument:
    stamp = to_iso(BASE_TIME + timedelta(minutes=index))
    return ThreadDocument(
        text=f"thread {index}",
        delete_password="pw",
        created_on=stamp,
        bumped_on=stamp,
        replies=[
            ReplyDocument(text=f"reply {n}", delete_password="rpw", created_on=stamp)
            for n in range(reply_count)
        ],
    )


# --- POST /api/threads/{board} ---

def test_create_thread_on_new_board_creates_one_board(client: TestClient, db_session: Session):
    response = client.post("/api/threads/general", json={"text": "hello", "delete_password": "p1"})
    assert response.status_code == 200

    boards = db_session.query(Board).filter(Board.name == "general").all()
    assert len(boards) == 1
    assert len(boards[0].threads) == 1
    assert boards[0].threads[0]["_id"] == response.json()["_id"]


def test_create_thread_returns_full_thread(client: TestClient):
    response = client.post("/api/threads/general", json={"text": "hello", "delete_password": "p1"})
    data = response.json()

    assert data["_id"]
    assert data["text"] == "hello"
    assert data["delete_password"] == "p1"
    assert data["reported"] is False
    assert data["replies"] == []
    assert data["created_on"] == data["bumped_on"]
    assert data["created_on"].endswith("Z")


def test_create_thread_appends_to_existing_board(client: TestClient, db_session: Session, make_thread):
    first = make_thread("general", text="first")
    second = make_thread("general", text="second")

    boards = db_session.query(Board).all()
    assert len(boards) == 1
    assert [t["_id"] for t in boards[0].threads] == [first["_id"], second["_id"]]


def test_create_thread_board_in_body_takes_precedence(client: TestClient, db_session: Session):
    response = client.post(
        "/api/threads/general",
        json={"text": "hello", "delete_password": "p1", "board": "other"},
    )
    assert response.status_code == 200

    names = [b.name for b in db_session.query(Board).all()]
    assert names == ["other"]


def test_create_thread_accepts_form_data(client: TestClient, db_session: Session):
    response = client.post("/api/threads/forms", data={"text": "from a form", "delete_password": "p1"})
    assert response.status_code == 200
    assert response.json()["text"] == "from a form"
    assert db_session.query(Board).filter(Board.name == "forms").count() == 1


def test_create_thread_missing_fields(client: TestClient, db_session: Session):
    response = client.post("/api/threads/general", json={})
    assert response.status_code == 200
    assert response.json() == {"error": "Missing or invalid field(s): delete_password, text"}
    assert db_session.query(Board).count() == 0


# --- GET /api/threads/{board} ---

def test_list_threads_unknown_board(client: TestClient):
    response = client.get("/api/threads/nowhere")
    assert response.status_code == 200
    assert response.json() == {"error": "No board with this name"}


def test_list_threads_returns_ten_most_recently_bumped(client: TestClient, db_session: Session):
    seed_board(db_session, "busy", [make_thread_document(i) for i in range(12)])

    response = client.get("/api/threads/busy")
    data = response.json()

    assert len(data) == 10
    assert [t["text"] for t in data] == [f"thread {i}" for i in range(11, 1, -1)]
    bumps = [t["bumped_on"] for t in data]
    assert bumps == sorted(bumps, reverse=True)


def test_list_threads_reply_preview_and_count(client: TestClient, db_session: Session):
    seed_board(db_session, "chatty", [make_thread_document(0, reply_count=5)])

    data = client.get("/api/threads/chatty").json()
    thread = data[0]

    assert thread["replycount"] == 5
    assert len(thread["replies"]) == 3
    assert [r["text"] for r in thread["replies"]] == ["reply 0", "reply 1", "reply 2"]
    assert set(thread) == {"_id", "text", "created_on", "bumped_on", "replies", "replycount"}
    for reply in thread["replies"]:
        assert set(reply) == {"_id", "text", "created_on"}


def test_list_threads_hides_passwords_and_report_flags(client: TestClient, make_thread, make_reply):
    thread = make_thread("general")
    make_reply("general", thread["_id"])

    listed = client.get("/api/threads/general").json()[0]
    assert "delete_password" not in listed
    assert "reported" not in listed
    assert "delete_password" not in listed["replies"][0]
    assert "reported" not in listed["replies"][0]


# --- PUT /api/threads/{board} ---

def test_report_thread(client: TestClient, make_thread):
    thread = make_thread("general")

    response = client.put("/api/threads/general", json={"report_id": thread["_id"]})
    assert response.status_code == 200
    assert response.text == "reported"
    assert response.headers["content-type"].startswith("text/plain")

    stored = client.get("/api/replies/general", params={"thread_id": thread["_id"]}).json()
    assert stored["reported"] is True
    assert stored["bumped_on"] >= stored["created_on"]


def test_report_thread_twice_is_idempotent(client: TestClient, make_thread):
    thread = make_thread("general")

    first = client.put("/api/threads/general", json={"report_id": thread["_id"]})
    second = client.put("/api/threads/general", json={"report_id": thread["_id"]})
    assert first.text == "reported"
    assert second.text == "reported"

    stored = client.get("/api/replies/general", params={"thread_id": thread["_id"]}).json()
    assert stored["reported"] is True


def test_report_thread_unknown_id(client: TestClient, make_thread):
    make_thread("general")
    response = client.put("/api/threads/general", json={"report_id": "does-not-exist"})
    assert response.json() == {"error": "Thread not found"}


def test_report_thread_unknown_board(client: TestClient):
    response = client.put("/api/threads/nowhere", json={"report_id": "abc"})
    assert response.json() == {"error": "Board not found"}


# --- DELETE /api/threads/{board} ---

def test_delete_thread_with_correct_password(client: TestClient, make_thread, make_reply):
    thread = make_thread("general", password="secret")
    make_reply("general", thread["_id"])

    response = client.request(
        "DELETE",
        "/api/threads/general",
        json={"thread_id": thread["_id"], "delete_password": "secret"},
    )
    assert response.text == "success"

    stored = client.get("/api/replies/general", params={"thread_id": thread["_id"]}).json()
    assert stored["text"] == "[deleted]"
    assert stored["delete_password"] == "secret"
    assert len(stored["replies"]) == 1

    listed = client.get("/api/threads/general").json()
    assert len(listed) == 1
    assert listed[0]["text"] == "[deleted]"


def test_delete_thread_with_wrong_password(client: TestClient, make_thread):
    thread = make_thread("general", text="keep me", password="secret")

    response = client.request(
        "DELETE",
        "/api/threads/general",
        json={"thread_id": thread["_id"], "delete_password": "wrong"},
    )
    assert response.status_code == 200
    assert response.text == "incorrect password"

    stored = client.get("/api/replies/general", params={"thread_id": thread["_id"]}).json()
    assert stored["text"] == "keep me"


def test_delete_thread_unknown_id(client: TestClient, make_thread):
    make_thread("general")
    response = client.request(
        "DELETE",
        "/api/threads/general",
        json={"thread_id": "does-not-exist", "delete_password": "p1"},
    )
    assert response.json() == {"error": "Thread not found"}


def test_delete_thread_unknown_board(client: TestClient):
    response = client.request(
        "DELETE",
        "/api/threads/nowhere",
        json={"thread_id": "abc", "delete_password": "p1"},
    )
    assert response.json() == {"error": "Board not found"}


# --- Storage failures ---

def test_create_thread_storage_failure_is_plain_text(client: TestClient, break_storage):
    break_storage()

    response = client.post("/api/threads/general", json={"text": "hello", "delete_password": "p1"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "There was an error saving in post"


def test_list_threads_storage_failure(client: TestClient, make_thread, break_storage):
    make_thread("general")
    break_storage()

    response = client.get("/api/threads/general")
    assert response.status_code == 200
    assert response.json() == {"error": "There was an error fetching threads"}


def test_report_thread_save_failure(client: TestClient, make_thread, break_storage):
    thread = make_thread("general")
    break_storage("save")

    response = client.put("/api/threads/general", json={"report_id": thread["_id"]})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "There was an error reporting the thread"}


def test_delete_thread_save_failure_keeps_text(client: TestClient, make_thread, break_storage):
    thread = make_thread("general", text="keep me", password="secret")
    break_storage("save")

    response = client.request(
        "DELETE",
        "/api/threads/general",
        json={"thread_id": thread["_id"], "delete_password": "secret"},
    )
    assert response.json() == {"error": "There was an error deleting the thread"}

    stored = client.get("/api/replies/general", params={"thread_id": thread["_id"]}).json()
    assert stored["text"] == "keep me"


# --- Malformed bodies ---

def test_create_thread_unparseable_multipart(client: TestClient, db_session: Session):
    body = b'--xyz\r\nContent-Disposition: form-data\r\n\r\nhello\r\n--xyz--\r\n'
    response = client.post(
        "/api/threads/general",
        content=body,
        headers={"content-type": "multipart/form-data; boundary=xyz"},
    )
    assert response.status_code == 200
    assert response.json() == {"error": "Missing or invalid field(s): delete_password, text"}
    assert db_session.query(Board).count() == 0
