# fuse_server/core/database.py
import logging
from typing import Annotated, Generator

from fastapi import Depends, Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Creates the pooled engine shared by every request of one application."""
    kwargs = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        # Handlers run on the worker thread pool
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in IN_MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, echo=echo, **kwargs)
    if is_sqlite:
        # SQLite leaves foreign keys unchecked unless asked on every connection
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_db(engine: Engine) -> None:
    # Table classes must be imported before create_all sees them
    from fuse_server.models import channel, editor, iteration, user, video  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database schema ensured.")


def get_db(request: Request) -> Generator[Session, None, None]:
    with Session(request.app.state.engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]
