"""
Database engine and session setup for GradePath.

Lessons, quizzes and learner progress live in one relational store:
SQLite by default for local work, Postgres when DATABASE_URL points at one.
"""

import logging
import os
import time

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

timing_logger = logging.getLogger("gradepath.db.timing")
timing_logger.setLevel(logging.DEBUG if os.getenv("DEBUG_QUERIES") else logging.WARNING)

SLOW_QUERY_MS = int(os.getenv("SLOW_QUERY_THRESHOLD_MS", "100"))
MAX_LOGGED_STATEMENT = 500

DEFAULT_DATABASE_URL = "sqlite:///./gradepath.db"


def normalize_database_url(url: str) -> str:
    """Rewrite hosted-Postgres ``postgres://`` URLs to the scheme SQLAlchemy accepts."""
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # TestClient and uvicorn workers share the connection across threads
        return {"connect_args": {"check_same_thread": False}, "pool_pre_ping": True}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
    }


DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL))

engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))


@event.listens_for(engine, "before_cursor_execute")
def _start_query_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("gradepath_query_start", []).append(time.perf_counter())


@event.listens_for(engine, "after_cursor_execute")
def _log_slow_query(conn, cursor, statement, parameters, context, executemany):
    started = conn.info.get("gradepath_query_start")
    if not started:
        return

    elapsed_ms = (time.perf_counter() - started.pop()) * 1000
    if elapsed_ms <= SLOW_QUERY_MS:
        return
    if len(statement) > MAX_LOGGED_STATEMENT:
        statement = statement[:MAX_LOGGED_STATEMENT] + "..."
    timing_logger.warning("Slow query (%.1fms): %s", elapsed_ms, statement)


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a session for one request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create any missing lesson, quiz and progress tables."""
    # Models register themselves on Base when imported
    from gradepath.models import models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def ping(db) -> bool:
    """Round-trip a trivial query; False when the database is unreachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error("Database ping failed: %s", e)
        return False
