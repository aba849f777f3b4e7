"""Core configuration and infrastructure helpers."""

from .config import Settings, load_settings, normalize_database_url
from .database import build_engine, get_session, init_db
from .logging import setup_logging
from .time import utcnow

__all__ = [
    "Settings",
    "build_engine",
    "get_session",
    "init_db",
    "load_settings",
    "normalize_database_url",
    "setup_logging",
    "utcnow",
]
