"""Dev seeding helper for the reference catalog data.

Creates the JDIHN document types, workflow statuses, root legal subjects,
sample authors and a system user. Idempotent: rows are matched by slug (or
email for the user) and only missing ones are inserted.
"""

import asyncio
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jdih.app.db.engine import get_async_engine
from jdih.app.db.models import Author, DocumentStatus, DocumentType, Subject, User

SYSTEM_USER_EMAIL = "admin@jdih.local"

DOCUMENT_TYPES: list[dict[str, Any]] = [
    {
        "name": "Peraturan Perundang-undangan",
        "slug": "peraturan",
        "description": "Peraturan perundang-undangan meliputi UU, PP, Perpres, Permen, Perda, dan lainnya",
        "icon": "heroicon-o-scale",
        "sort_order": 1,
    },
    {
        "name": "Putusan Pengadilan",
        "slug": "putusan",
        "description": "Putusan pengadilan dari berbagai tingkat peradilan",
        "icon": "heroicon-o-building-office-2",
        "sort_order": 2,
    },
    {
        "name": "Monografi Hukum",
        "slug": "monografi",
        "description": "Buku, jurnal, dan literatur hukum lainnya",
        "icon": "heroicon-o-book-open",
        "sort_order": 3,
    },
    {
        "name": "Artikel Hukum",
        "slug": "artikel",
        "description": "Artikel, makalah, dan tulisan hukum",
        "icon": "heroicon-o-document-text",
        "sort_order": 4,
    },
]

DOCUMENT_STATUSES: list[dict[str, Any]] = [
    {"name": "Draft", "slug": "draft", "color": "gray", "is_published": False, "sort_order": 1},
    {"name": "Review", "slug": "review", "color": "warning", "is_published": False, "sort_order": 2},
    {"name": "Approved", "slug": "approved", "color": "info", "is_published": False, "sort_order": 3},
    {"name": "Published", "slug": "published", "color": "success", "is_published": True, "sort_order": 4},
    {"name": "Archived", "slug": "archived", "color": "secondary", "is_published": False, "sort_order": 5},
]

SUBJECTS: list[dict[str, Any]] = [
    {"name": "Hukum Pidana", "slug": "hukum-pidana", "code": "HP", "sort_order": 1},
    {"name": "Hukum Perdata", "slug": "hukum-perdata", "code": "HPD", "sort_order": 2},
    {"name": "Hukum Tata Negara", "slug": "hukum-tata-negara", "code": "HTN", "sort_order": 3},
    {"name": "Hukum Administrasi Negara", "slug": "hukum-administrasi-negara", "code": "HAN", "sort_order": 4},
    {"name": "Hukum Ekonomi", "slug": "hukum-ekonomi", "code": "HE", "sort_order": 5},
    {"name": "Hukum Lingkungan", "slug": "hukum-lingkungan", "code": "HL", "sort_order": 6},
    {"name": "Hukum Ketenagakerjaan", "slug": "hukum-ketenagakerjaan", "code": "HK", "sort_order": 7},
    {"name": "Hukum Internasional", "slug": "hukum-internasional", "code": "HI", "sort_order": 8},
]

AUTHORS: list[dict[str, Any]] = [
    {
        "name": "Prof. Dr. H. Jimly Asshiddiqie, S.H.",
        "slug": "jimly-asshiddiqie",
        "institution": "Universitas Indonesia",
        "position": "Guru Besar Hukum Tata Negara",
    },
    {
        "name": "Prof. Dr. Bagir Manan, S.H., M.C.L.",
        "slug": "bagir-manan",
        "institution": "Universitas Padjadjaran",
        "position": "Guru Besar Hukum Tata Negara",
    },
    {
        "name": "Dr. Hikmahanto Juwana, S.H., LL.M., Ph.D.",
        "slug": "hikmahanto-juwana",
        "institution": "Universitas Indonesia",
        "position": "Guru Besar Hukum Internasional",
    },
    {
        "name": "Prof. Dr. Satjipto Rahardjo, S.H.",
        "slug": "satjipto-rahardjo",
        "institution": "Universitas Diponegoro",
        "position": "Guru Besar Sosiologi Hukum",
    },
]


async def _insert_missing(session: AsyncSession, model: type[Any], rows: list[dict[str, Any]]) -> int:
    """Insert rows whose slug is not present yet; returns how many were added."""
    existing = set((await session.execute(select(model.slug))).scalars().all())
    missing = [row for row in rows if row["slug"] not in existing]
    session.add_all(model(**row) for row in missing)
    return len(missing)


async def seed_catalog(session: AsyncSession) -> dict[str, int]:
    """Seed reference data into an open session and commit.

    Returns:
        Number of rows created per table
    """
    created = {
        "document_types": await _insert_missing(session, DocumentType, DOCUMENT_TYPES),
        "document_statuses": await _insert_missing(session, DocumentStatus, DOCUMENT_STATUSES),
        "subjects": await _insert_missing(session, Subject, SUBJECTS),
        "authors": await _insert_missing(session, Author, AUTHORS),
        "users": 0,
    }

    user = await session.scalar(select(User).where(User.email == SYSTEM_USER_EMAIL))
    if user is None:
        session.add(User(name="Administrator JDIH", email=SYSTEM_USER_EMAIL))
        created["users"] = 1

    await session.commit()
    return created


async def seed_dev_catalog() -> None:
    """Seed the configured database with reference data."""
    async with AsyncSession(get_async_engine()) as session:
        created = await seed_catalog(session)

    for table, count in created.items():
        print(f"{table}: {count} created")
    print("✅ Dev seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_dev_catalog())
