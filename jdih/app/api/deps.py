"""Shared FastAPI dependencies for the catalog routes."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from jdih.app.config import Settings, get_settings
from jdih.app.db.engine import get_async_engine, get_session
from jdih.app.db.sql_repositories import SqlDocumentRepository
from jdih.app.search.query import reject_repeated_params
from jdih.app.tracking.counters import CounterTracker


async def get_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SqlDocumentRepository:
    """Request-scoped document repository."""
    return SqlDocumentRepository(session, settings.default_language)


def get_counter_tracker(
    engine: Annotated[AsyncEngine, Depends(get_async_engine)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CounterTracker:
    """Counter tracker that opens its own session per increment.

    Increments run after the response, once the request session is closed.
    """
    return CounterTracker.from_engine(engine, settings)


def single_valued(*names: str) -> Callable[[Request], None]:
    """Dependency rejecting repeated occurrences of the named query parameters."""

    def check(request: Request) -> None:
        reject_repeated_params(request.query_params, names)

    return check


Repository = Annotated[SqlDocumentRepository, Depends(get_repository)]
Tracker = Annotated[CounterTracker, Depends(get_counter_tracker)]
AppSettings = Annotated[Settings, Depends(get_settings)]
