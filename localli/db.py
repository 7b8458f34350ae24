# localli/db.py

import logging

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from .config import DATABASE_URL, DB_ECHO

logger = logging.getLogger(__name__)


def make_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # required for SQLite + FastAPI; timeout lets concurrent writers wait on the lock
        connect_args = {"check_same_thread": False, "timeout": 30}

    engine = create_engine(url, echo=DB_ECHO, connect_args=connect_args, **kwargs)
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def init_db(engine: Engine) -> None:
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


# Dependency: one session per request
def get_session(request: Request):
    with Session(request.app.state.engine) as session:
        yield session
