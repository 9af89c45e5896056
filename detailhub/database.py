import logging
import time
from collections.abc import Iterator
from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from . import config

logger = logging.getLogger(__name__)

Base = declarative_base()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases must share a single connection across sessions
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,  # Test connections before using
        "pool_recycle": config.DB_POOL_RECYCLE,
        "pool_size": config.DB_POOL_SIZE,
        "max_overflow": config.DB_MAX_OVERFLOW,
        "pool_timeout": config.DB_POOL_TIMEOUT,
    }


class Database:
    """Owns the engine and session factory for one application instance"""

    def __init__(self, url: Optional[str] = None, log_slow_queries: Optional[bool] = None):
        self.url = url or config.DATABASE_URL
        try:
            self.engine: Engine = create_engine(self.url, echo=False, **_engine_options(self.url))
            logger.info("✅ Database engine created successfully")
        except Exception as e:
            logger.error(f"❌ Failed to create database engine: {e}")
            raise

        if log_slow_queries is None:
            log_slow_queries = config.DB_LOG_SLOW_QUERIES
        if log_slow_queries:
            self._attach_slow_query_logging(config.DB_SLOW_QUERY_THRESHOLD)

        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def _attach_slow_query_logging(self, threshold: float) -> None:
        @event.listens_for(self.engine, "before_cursor_execute")
        def before_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
            conn.info.setdefault("query_start_time", []).append(time.time())

        @event.listens_for(self.engine, "after_cursor_execute")
        def after_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
            total = time.time() - conn.info["query_start_time"].pop(-1)
            if total > threshold:
                logger.warning(f"🐌 Slow query ({total:.2f}s): {statement[:200]}...")

        logger.info(f"📊 Slow query logging enabled (threshold: {threshold}s)")

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine, checkfirst=True)

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
