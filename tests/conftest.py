"""Shared pytest fixtures for all test suites."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterable
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from jdih.app.config import Settings, get_settings
from jdih.app.db.engine import get_async_engine
from jdih.app.db.models import (
    Author,
    Base,
    Document,
    DocumentAuthor,
    DocumentStatus,
    DocumentType,
    Subject,
)
from jdih.app.db.seed_dev import seed_catalog
from jdih.app.main import app

MakeDocument = Callable[..., Awaitable[int]]


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite file database; every connection sees the same data."""
    return f"sqlite+aiosqlite:///{tmp_path / 'jdih.db'}"


@pytest_asyncio.fixture
async def engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine with the schema created and reference data seeded."""
    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine) as session:
        await seed_catalog(session)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting rows directly."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    """Empty document file store."""
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def settings(database_url: str, storage_root: Path) -> Settings:
    """Settings pointing at the test database and file store."""
    return Settings(database_url=database_url, storage_root=str(storage_root), redis_url=None)


@pytest.fixture
def make_document(engine: AsyncEngine) -> MakeDocument:
    """Factory inserting one document; returns its id.

    Type and status are given by slug, subjects and authors by slug list
    (authors keep list order as pivot sort_order).
    """

    async def _make(
        title: str,
        *,
        type_slug: str = "peraturan",
        status_slug: str = "published",
        subjects: Iterable[str] = (),
        authors: Iterable[str] = (),
        **fields: Any,
    ) -> int:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            type_id = await session.scalar(
                select(DocumentType.id).where(DocumentType.slug == type_slug)
            )
            status_id = await session.scalar(
                select(DocumentStatus.id).where(DocumentStatus.slug == status_slug)
            )

            subject_slugs = list(subjects)
            by_slug = {
                subject.slug: subject
                for subject in (
                    await session.scalars(select(Subject).where(Subject.slug.in_(subject_slugs)))
                ).all()
            }

            author_slugs = list(authors)
            author_ids = {
                slug: author_id
                for slug, author_id in (
                    await session.execute(
                        select(Author.slug, Author.id).where(Author.slug.in_(author_slugs))
                    )
                ).all()
            }

            fields.setdefault("slug", title.lower().replace(" ", "-"))
            document = Document(
                title=title,
                document_type_id=type_id,
                document_status_id=status_id,
                subjects=[by_slug[slug] for slug in subject_slugs],
                author_links=[
                    DocumentAuthor(author_id=author_ids[slug], sort_order=position)
                    for position, slug in enumerate(author_slugs)
                ],
                **fields,
            )
            session.add(document)
            await session.commit()
            return document.id

    return _make


@pytest_asyncio.fixture
async def client(
    engine: AsyncEngine, settings: Settings
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client against the app, wired to the test engine and settings."""
    app.dependency_overrides[get_async_engine] = lambda: engine
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to be a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url or not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip("DATABASE_URL is not PostgreSQL - skipping postgres test")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
