"""
Settings and database wiring for the message board.
"""
from .settings import Settings, get_settings, reload_settings
from .database import Base, SessionLocal, build_engine, engine
from .db import get_db

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
    "Base",
    "SessionLocal",
    "build_engine",
    "engine",
    "get_db",
]
