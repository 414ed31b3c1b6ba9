"""Core app configuration, database and security."""

from notes_api.core.config import get_settings, settings
from notes_api.core.database import Database, get_db

__all__ = ["Database", "get_db", "get_settings", "settings"]
