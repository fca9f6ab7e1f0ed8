# troop_manager/config/__init__.py
from .settings import settings, validate_settings
from .database import db_connection, get_database, ensure_indexes

__all__ = [
    "settings",
    "validate_settings",
    "db_connection",
    "get_database",
    "ensure_indexes",
]
