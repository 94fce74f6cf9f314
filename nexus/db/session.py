"""Engine e sessão SQLite para uso síncrono (rotas async chamam em to_thread)."""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy.engine import make_url
from sqlmodel import Session, SQLModel, create_engine

from nexus.db.models import PixCharge  # noqa: F401  registra a tabela no metadata

DEFAULT_DATABASE_URL = "sqlite:///./data/nexus.db"

_engine = None


def _ensure_sqlite_dir(url: str) -> None:
    """Cria o diretório do arquivo SQLite, se for o caso."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)


def get_engine():
    global _engine
    if _engine is None:
        url = (os.getenv("DATABASE_URL") or "").strip() or DEFAULT_DATABASE_URL
        _ensure_sqlite_dir(url)
        is_sqlite = make_url(url).get_backend_name() == "sqlite"
        connect_args = {"check_same_thread": False} if is_sqlite else {}
        _engine = create_engine(url, connect_args=connect_args)
    return _engine


def reset_engine() -> None:
    """Descarta o engine atual (próximo get_engine relê DATABASE_URL)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


@contextmanager
def get_session() -> Generator[Session, None, None]:
    with Session(get_engine()) as session:
        yield session


def create_all_tables() -> None:
    SQLModel.metadata.create_all(get_engine())
