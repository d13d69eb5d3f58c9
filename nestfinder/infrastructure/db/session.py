# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Engine and transactional session scope shared by every request."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from nestfinder.shared.config import load_config
from nestfinder.shared.config.settings import DatabaseConfig
from nestfinder.shared.logging import logger

# Applied to every new SQLite connection.
SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
    "PRAGMA busy_timeout=30000",
)


class Base(DeclarativeBase):
    pass


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(database: DatabaseConfig) -> Engine:
    options: dict[str, object] = {
        "pool_pre_ping": True,
        "pool_size": database.pool_size,
        "max_overflow": database.max_overflow,
        "pool_timeout": database.pool_timeout,
    }
    if _is_sqlite(database.url):
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": database.pool_timeout,
        }
    engine = create_engine(database.url, **options)

    if _is_sqlite(database.url):

        @event.listens_for(engine, "connect")
        def _apply_pragmas(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            try:
                for pragma in SQLITE_PRAGMAS:
                    cursor.execute(pragma)
            finally:
                cursor.close()

    return engine


ENGINE: Engine = build_engine(load_config().database)
SessionFactory = sessionmaker(bind=ENGINE, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope() -> Iterator[Session]:
    """One unit of work: commit on success, roll back and re-raise on any error.

    Each scope gets its own session, so a nested scope commits independently.
    """
    session = SessionFactory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.debug("db: transaction rolled back")
        raise
    finally:
        session.close()


def init_db() -> None:
    from nestfinder.infrastructure.db import models  # noqa: F401  registers the tables

    Base.metadata.create_all(bind=ENGINE)
    logger.info(f"db: schema ready ({ENGINE.url.render_as_string(hide_password=True)})")
