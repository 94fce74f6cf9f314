"""Camada de persistência SQLite (SQLModel)."""

from nexus.db.models import PixCharge
from nexus.db.session import create_all_tables, get_engine, get_session

__all__ = [
    "PixCharge",
    "create_all_tables",
    "get_engine",
    "get_session",
]
