"""Database engine construction and session management.

The engine and session factory are built once by the application factory and
kept on ``app.state``; nothing in this module holds a process-wide client.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from orgtree.core.config import Settings
from orgtree.core.structured_logging import log_json

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    Args:
        settings: Application settings

    Returns:
        AsyncEngine bound to ``settings.database_url``
    """
    url = settings.database_url
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

    kwargs = {"echo": settings.sql_echo}
    # Use NullPool for testing environments to avoid connection pool issues
    if "test" in url:
        kwargs["poolclass"] = NullPool

    engine = create_async_engine(url, **kwargs)
    if settings.slow_query_ms > 0:
        install_slow_query_logging(engine, settings.slow_query_ms)
    return engine


def install_slow_query_logging(engine: AsyncEngine, threshold_ms: float) -> None:
    """Log statements slower than ``threshold_ms`` as ``slow_query`` events."""

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _before_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ) -> None:
        context._query_start_time = time.perf_counter()

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def _after_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ) -> None:
        start = getattr(context, "_query_start_time", None)
        if start is None:
            return

        duration_ms = (time.perf_counter() - start) * 1000
        if duration_ms < threshold_ms:
            return

        max_len = 2000
        stmt = str(statement)
        if len(stmt) > max_len:
            stmt = stmt[: max_len - 3] + "..."

        log_json(
            logger,
            logging.WARNING,
            "slow_query",
            duration_ms=round(duration_ms, 2),
            statement=stmt,
        )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used for request-scoped sessions."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    Use cases own their commits; anything left uncommitted when the request
    fails is rolled back here.

    Yields:
        AsyncSession: Database session
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
