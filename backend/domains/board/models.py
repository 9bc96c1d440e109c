import uuid

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from backend.domains.shared.db_base import Base


def _new_board_id() -> str:
    return uuid.uuid4().hex


# Message Board Models
class Board(Base):
    """
    One board document: the board row embeds its threads, and every thread
    embeds its replies, as a JSON array. The whole document is rewritten on
    each save; ``version`` makes that save conditional on the version read.
    """
    __tablename__ = "boards"

    id = Column(String(32), primary_key=True, default=_new_board_id)
    name = Column(String, unique=True, nullable=False, index=True)
    threads = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __mapper_args__ = {"version_id_col": version}
