from typing import Iterator

from sqlalchemy.orm import Session
from backend.config.database import SessionLocal


def get_db() -> Iterator[Session]:
    """Request-scoped session; closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
