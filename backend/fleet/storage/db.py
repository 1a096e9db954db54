from __future__ import annotations

from typing import Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker


def init_engine_and_sessionmaker(database_url: str) -> Tuple[Engine, sessionmaker]:
    """Initialise SQLAlchemy engine and sessionmaker.

    SQLite connections are shared with FastAPI's threadpool, so same-thread checks are off.
    """
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, future=True, connect_args=connect_args)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    return engine, SessionLocal
