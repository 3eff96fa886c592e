"""View/download counter tracker.

Increments are best-effort: storage failures are logged, counted and
swallowed so they never turn a served document into an error response.
"""

import asyncio
import time
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from jdih.app.config import Settings
from jdih.app.db.engine import create_async_session_factory
from jdih.app.db.repositories import DocumentRepository
from jdih.app.db.sql_repositories import SqlDocumentRepository
from jdih.app.errors import StorageUnavailableError
from jdih.app.utils.logging import StructuredCounterLogger
from jdih.app.utils.metrics import PrometheusCounterMetrics

RepositoryScope = Callable[[], AbstractAsyncContextManager[DocumentRepository]]

# Strong references to increments detached after a timeout
_detached: set[asyncio.Task[int | None]] = set()


class CounterKind(str, Enum):
    """Monotonic document counters."""

    view = "view_count"
    download = "download_count"


class CounterTracker:
    """Applies view/download increments in their own session."""

    def __init__(
        self,
        repository_scope: RepositoryScope,
        *,
        timeout_ms: int = 500,
        log: StructuredCounterLogger | None = None,
        metrics: PrometheusCounterMetrics | None = None,
    ) -> None:
        self._repository_scope = repository_scope
        self._timeout_s = timeout_ms / 1000
        self._log = log or StructuredCounterLogger()
        self._metrics = metrics or PrometheusCounterMetrics()

    @classmethod
    def from_engine(cls, engine: AsyncEngine, settings: Settings) -> "CounterTracker":
        """Tracker whose increments each open a fresh session on `engine`."""
        session_factory = create_async_session_factory(engine)

        @asynccontextmanager
        async def scope() -> AsyncIterator[DocumentRepository]:
            async with session_factory() as session:
                yield SqlDocumentRepository(session, settings.default_language)

        return cls(scope, timeout_ms=settings.counter_timeout_ms)

    async def increment(self, document_id: int, counter: CounterKind) -> int | None:
        """Add one to `counter`; never raises for storage failures.

        Returns:
            New count, or None if the increment failed or the document is gone
        """
        start = time.perf_counter()
        try:
            async with self._repository_scope() as repository:
                if counter is CounterKind.view:
                    new_count = await repository.increment_view_count(document_id)
                else:
                    new_count = await repository.increment_download_count(document_id)
        except (StorageUnavailableError, SQLAlchemyError) as e:
            self._finish(document_id, counter, "error", start, error_reason=type(e).__name__)
            return None

        if new_count is None:
            self._finish(document_id, counter, "missing", start)
            return None

        self._finish(document_id, counter, "success", start, new_count=new_count)
        return new_count

    async def increment_within_timeout(
        self, document_id: int, counter: CounterKind
    ) -> int | None:
        """Increment, waiting at most the configured timeout.

        A slow increment is detached and keeps running; the caller gets None.
        """
        task = asyncio.ensure_future(self.increment(document_id, counter))
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout=self._timeout_s)
        except asyncio.TimeoutError:
            _detached.add(task)
            task.add_done_callback(_detached.discard)
            self._metrics.inc_failure(counter.value, "timeout")
            self._log.log_increment(
                document_id,
                counter.value,
                "detached",
                self._timeout_s * 1000,
                error_reason="timeout",
            )
            return None

    async def record_view(self, document_id: int) -> int | None:
        """Count one render of a document's detail page."""
        return await self.increment(document_id, CounterKind.view)

    async def record_download(self, document_id: int) -> int | None:
        """Count one successful file retrieval."""
        return await self.increment(document_id, CounterKind.download)

    def _finish(
        self,
        document_id: int,
        counter: CounterKind,
        outcome: str,
        start: float,
        new_count: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        latency_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_latency(counter.value, outcome, latency_ms)
        if outcome == "success":
            self._metrics.inc_applied(counter.value)
        else:
            self._metrics.inc_failure(counter.value, error_reason or outcome)
        self._log.log_increment(
            document_id,
            counter.value,
            outcome,
            latency_ms,
            new_count=new_count,
            error_reason=error_reason,
        )
