"""Integration tests for the dev seeding helper."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from jdih.app.db.models import Author, DocumentStatus, DocumentType, Subject, User
from jdih.app.db.seed_dev import SYSTEM_USER_EMAIL, seed_catalog

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_reference_data_present(session: AsyncSession) -> None:
    """The engine fixture seeds once; everything is in place."""
    type_slugs = (await session.scalars(select(DocumentType.slug).order_by(DocumentType.sort_order))).all()
    published = (
        await session.scalars(select(DocumentStatus.slug).where(DocumentStatus.is_published.is_(True)))
    ).all()

    assert list(type_slugs) == ["peraturan", "putusan", "monografi", "artikel"]
    assert list(published) == ["published"]
    assert await session.scalar(select(func.count()).select_from(Subject)) == 8
    assert await session.scalar(select(func.count()).select_from(Author)) == 4
    assert await session.scalar(select(User.email)) == SYSTEM_USER_EMAIL


@pytest.mark.asyncio
async def test_seeding_is_idempotent(engine: AsyncEngine) -> None:
    async with AsyncSession(engine) as session:
        created = await seed_catalog(session)

    assert created == {
        "document_types": 0,
        "document_statuses": 0,
        "subjects": 0,
        "authors": 0,
        "users": 0,
    }


@pytest.mark.asyncio
async def test_seeding_fills_gaps(engine: AsyncEngine) -> None:
    async with AsyncSession(engine) as session:
        artikel = await session.scalar(select(DocumentType).where(DocumentType.slug == "artikel"))
        await session.delete(artikel)
        await session.commit()

    async with AsyncSession(engine) as session:
        created = await seed_catalog(session)

    assert created["document_types"] == 1
    assert created["subjects"] == 0
