# exercise_tracker/db/engine.py

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from exercise_tracker.errors import StoreError

logger = logging.getLogger(__name__)


def create_store_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    kwargs = {}

    if url.get_backend_name() == "sqlite":
        # Handlers run on a thread pool, connections move between threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty db
            kwargs["poolclass"] = StaticPool

    # echo=True if you want to see SQL printed in the terminal
    return create_engine(url, future=True, **kwargs)


def get_engine(request: Request) -> Engine:
    """
    FastAPI dependency: the engine opened by the application lifespan.
    """
    return request.app.state.engine


@contextmanager
def connect(engine: Engine, write: bool = False) -> Iterator[Connection]:
    """
    Scoped store access. Writes are committed on success and rolled back on
    failure; any SQLAlchemy failure surfaces as StoreError.
    """
    try:
        with (engine.begin() if write else engine.connect()) as conn:
            yield conn
    except SQLAlchemyError as exc:
        logger.exception("Store operation failed")
        raise StoreError() from exc
