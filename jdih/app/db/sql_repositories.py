"""SQL implementation of the document repository."""

import functools
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import ParamSpec, TypeVar

from sqlalchemy import ColumnElement, Select, extract, func, or_, select, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from jdih.app.db.models import (
    Author,
    Document,
    DocumentAuthor,
    DocumentStatus,
    DocumentType,
    Subject,
    document_subject,
)
from jdih.app.db.queries import (
    apply_filters,
    apply_sort,
    count_rows,
    published_documents,
    with_relations,
)
from jdih.app.errors import NotFoundError, StorageUnavailableError
from jdih.app.models.catalog import (
    AuthorCredit,
    AuthorListing,
    CatalogStatistics,
    DocumentRecord,
    DocumentStatusSummary,
    DocumentTypeCount,
    DocumentTypeSummary,
    SubjectNode,
    SubjectSummary,
    SubjectTrail,
)
from jdih.app.search.query import DocumentQuery, PageRequest
from jdih.app.search.subjects import SubjectLink, breadcrumb

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def storage_guard(func_: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Re-raise driver connectivity failures as StorageUnavailableError."""

    @functools.wraps(func_)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func_(*args, **kwargs)
        except (OperationalError, InterfaceError, OSError) as e:
            logger.error(
                f"Document store unavailable during {func_.__name__}",
                extra={"structured": {"operation": func_.__name__, "error": type(e).__name__}},
            )
            raise StorageUnavailableError(f"{func_.__name__}: {type(e).__name__}") from e

    return wrapper


def _published_clauses() -> list[ColumnElement[bool]]:
    return [
        Document.deleted_at.is_(None),
        Document.document_status.has(DocumentStatus.is_published.is_(True)),
    ]


def to_record(doc: Document, default_language: str = "id") -> DocumentRecord:
    """Map a Document with loaded relations to a DocumentRecord."""
    doc_type = doc.document_type
    status = doc.document_status

    return DocumentRecord(
        id=doc.id,
        title=doc.title,
        slug=doc.slug,
        abstract=doc.abstract,
        content=doc.content,
        note=doc.note,
        document_number=doc.document_number,
        call_number=doc.call_number,
        teu_number=doc.teu_number,
        language=doc.language or default_language,
        source=doc.source,
        location=doc.location,
        published_date=doc.published_date,
        effective_date=doc.effective_date,
        expired_date=doc.expired_date,
        meta_description=doc.meta_description,
        keywords=doc.keywords,
        is_featured=doc.is_featured,
        view_count=doc.view_count,
        download_count=doc.download_count,
        file_path=doc.file_path,
        file_format=doc.file_format,
        created_at=doc.created_at,
        updated_at=doc.updated_at,
        document_type=(
            DocumentTypeSummary(
                id=doc_type.id,
                name=doc_type.name,
                slug=doc_type.slug,
                description=doc_type.description,
                icon=doc_type.icon,
            )
            if doc_type is not None
            else None
        ),
        document_status=(
            DocumentStatusSummary(
                id=status.id,
                name=status.name,
                slug=status.slug,
                color=status.color,
                is_published=status.is_published,
            )
            if status is not None
            else None
        ),
        authors=[
            AuthorCredit(
                id=link.author.id,
                name=link.author.name,
                slug=link.author.slug,
                institution=link.author.institution,
                position=link.author.position,
                role=link.role,
                sort_order=link.sort_order,
            )
            for link in doc.author_links
        ],
        subjects=[
            SubjectSummary(
                id=subject.id,
                name=subject.name,
                slug=subject.slug,
                code=subject.code,
                parent_id=subject.parent_id,
            )
            for subject in doc.subjects
        ],
    )


class SqlDocumentRepository:
    """SQL implementation of DocumentRepository."""

    def __init__(self, session: AsyncSession, default_language: str = "id") -> None:
        self._session = session
        self._default_language = default_language

    async def _fetch(self, stmt: Select) -> list[DocumentRecord]:
        result = await self._session.execute(with_relations(stmt))
        return [to_record(doc, self._default_language) for doc in result.scalars().all()]

    async def _fetch_one(self, stmt: Select, not_found: str) -> DocumentRecord:
        records = await self._fetch(stmt.limit(1))
        if not records:
            raise NotFoundError(not_found)
        return records[0]

    @storage_guard
    async def find_published(
        self, query: DocumentQuery, page: PageRequest
    ) -> tuple[list[DocumentRecord], int]:
        """Find published documents matching the query."""
        stmt = apply_filters(published_documents(), query)

        total = (await self._session.execute(count_rows(stmt))).scalar_one()
        if total == 0:
            return ([], 0)

        stmt = apply_sort(stmt, query.sort).offset(page.offset).limit(page.limit)
        return (await self._fetch(stmt), total)

    @storage_guard
    async def find_by_slugs(self, type_slug: str, document_slug: str) -> DocumentRecord:
        """Resolve a document by type slug and document slug."""
        type_id = await self._session.scalar(
            select(DocumentType.id).where(DocumentType.slug == type_slug)
        )
        if type_id is None:
            raise NotFoundError(f"Document type '{type_slug}' not found")

        stmt = published_documents().where(
            Document.slug == document_slug,
            Document.document_type_id == type_id,
        )
        return await self._fetch_one(stmt, f"Document '{document_slug}' not found")

    @storage_guard
    async def get_published(self, document_id: int) -> DocumentRecord:
        """Get a published document by id."""
        stmt = published_documents().where(Document.id == document_id)
        return await self._fetch_one(stmt, f"Document {document_id} not found")

    @storage_guard
    async def get_published_by_slug(self, slug: str) -> DocumentRecord:
        """Get a published document by slug."""
        stmt = published_documents().where(Document.slug == slug)
        return await self._fetch_one(stmt, f"Document '{slug}' not found")

    @storage_guard
    async def find_related(self, document: DocumentRecord, limit: int) -> list[DocumentRecord]:
        """Other published documents sharing the type or any subject."""
        shared = []
        if document.document_type is not None:
            shared.append(Document.document_type_id == document.document_type.id)
        subject_ids = [subject.id for subject in document.subjects]
        if subject_ids:
            shared.append(Document.subjects.any(Subject.id.in_(subject_ids)))
        if not shared:
            return []

        stmt = (
            published_documents()
            .where(Document.id != document.id, or_(*shared))
            .order_by(
                Document.published_date.is_(None).asc(),
                Document.published_date.desc(),
                Document.id.asc(),
            )
            .limit(limit)
        )
        return await self._fetch(stmt)

    @storage_guard
    async def find_abstracts(self, page: PageRequest) -> tuple[list[DocumentRecord], int]:
        """Published documents that carry an abstract."""
        stmt = published_documents().where(Document.abstract.is_not(None))

        total = (await self._session.execute(count_rows(stmt))).scalar_one()
        if total == 0:
            return ([], 0)

        stmt = stmt.order_by(Document.id.asc()).offset(page.offset).limit(page.limit)
        return (await self._fetch(stmt), total)

    @storage_guard
    async def find_featured(self, limit: int) -> list[DocumentRecord]:
        """Featured published documents, newest published first."""
        stmt = (
            published_documents()
            .where(Document.is_featured.is_(True))
            .order_by(
                Document.published_date.is_(None).asc(),
                Document.published_date.desc(),
                Document.id.desc(),
            )
            .limit(limit)
        )
        return await self._fetch(stmt)

    @storage_guard
    async def find_latest(self, limit: int) -> list[DocumentRecord]:
        """Newest published documents."""
        stmt = (
            published_documents()
            .order_by(
                Document.published_date.is_(None).asc(),
                Document.published_date.desc(),
                Document.created_at.desc(),
                Document.id.desc(),
            )
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def _increment(self, document_id: int, column: str) -> int | None:
        counter = getattr(Document, column)
        stmt = (
            update(Document)
            .where(Document.id == document_id)
            # Keep updated_at untouched; counters are not content edits
            .values({column: counter + 1, "updated_at": Document.updated_at})
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            await self._session.rollback()
            return None

        new_count = await self._session.scalar(select(counter).where(Document.id == document_id))
        await self._session.commit()
        return new_count

    @storage_guard
    async def increment_view_count(self, document_id: int) -> int | None:
        """Atomically add one to view_count."""
        return await self._increment(document_id, "view_count")

    @storage_guard
    async def increment_download_count(self, document_id: int) -> int | None:
        """Atomically add one to download_count."""
        return await self._increment(document_id, "download_count")

    @storage_guard
    async def list_document_types(self) -> list[DocumentTypeCount]:
        """Active document types with published document counts."""
        counts = (
            select(Document.document_type_id, func.count(Document.id).label("n"))
            .where(*_published_clauses())
            .group_by(Document.document_type_id)
            .subquery()
        )
        stmt = (
            select(DocumentType, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.document_type_id == DocumentType.id)
            .where(DocumentType.is_active.is_(True))
            .order_by(DocumentType.sort_order, DocumentType.name)
        )
        result = await self._session.execute(stmt)

        return [
            DocumentTypeCount(
                id=doc_type.id,
                name=doc_type.name,
                slug=doc_type.slug,
                description=doc_type.description,
                icon=doc_type.icon,
                sort_order=doc_type.sort_order,
                documents_count=count,
            )
            for doc_type, count in result.all()
        ]

    @storage_guard
    async def list_subject_tree(self) -> list[SubjectNode]:
        """Active root subjects with their active descendants."""
        counts = (
            select(document_subject.c.subject_id, func.count().label("n"))
            .join(Document, Document.id == document_subject.c.document_id)
            .where(*_published_clauses())
            .group_by(document_subject.c.subject_id)
            .subquery()
        )
        stmt = (
            select(Subject, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.subject_id == Subject.id)
            .where(Subject.is_active.is_(True))
            .order_by(Subject.sort_order, Subject.name)
        )
        result = await self._session.execute(stmt)
        rows = result.all()

        nodes = {
            subject.id: SubjectNode(
                id=subject.id,
                name=subject.name,
                slug=subject.slug,
                code=subject.code,
                description=subject.description,
                documents_count=count,
            )
            for subject, count in rows
        }

        roots: list[SubjectNode] = []
        for subject, _ in rows:
            node = nodes[subject.id]
            if subject.parent_id is None:
                roots.append(node)
            elif subject.parent_id in nodes:
                nodes[subject.parent_id].children.append(node)

        return roots

    @storage_guard
    async def list_authors(self, page: PageRequest) -> tuple[list[AuthorListing], int]:
        """Active authors ordered by name, with published document counts."""
        counts = (
            select(DocumentAuthor.author_id, func.count().label("n"))
            .join(Document, Document.id == DocumentAuthor.document_id)
            .where(*_published_clauses())
            .group_by(DocumentAuthor.author_id)
            .subquery()
        )
        total = await self._session.scalar(
            select(func.count()).select_from(Author).where(Author.is_active.is_(True))
        )
        if not total:
            return ([], 0)

        stmt = (
            select(Author, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.author_id == Author.id)
            .where(Author.is_active.is_(True))
            .order_by(Author.name, Author.id)
            .offset(page.offset)
            .limit(page.limit)
        )
        result = await self._session.execute(stmt)

        authors = [
            AuthorListing(
                id=author.id,
                name=author.name,
                slug=author.slug,
                institution=author.institution,
                position=author.position,
                documents_count=count,
            )
            for author, count in result.all()
        ]
        return (authors, total)

    @storage_guard
    async def subject_trails(self, subject_ids: list[int]) -> list[SubjectTrail]:
        """Breadcrumbs for the given subjects."""
        if not subject_ids:
            return []

        result = await self._session.execute(select(Subject))
        subjects = {subject.id: subject for subject in result.scalars().all()}
        index = {
            subject.id: SubjectLink(name=subject.name, parent_id=subject.parent_id)
            for subject in subjects.values()
        }

        trails: list[SubjectTrail] = []
        for subject_id in subject_ids:
            subject = subjects.get(subject_id)
            if subject is None:
                continue
            trails.append(
                SubjectTrail(
                    subject=SubjectSummary(
                        id=subject.id,
                        name=subject.name,
                        slug=subject.slug,
                        code=subject.code,
                        parent_id=subject.parent_id,
                    ),
                    breadcrumb=breadcrumb(subject.id, index),
                )
            )
        return trails

    @storage_guard
    async def available_years(self) -> list[int]:
        """Distinct published years, newest first."""
        year = extract("year", Document.published_date)
        stmt = (
            select(year)
            .distinct()
            .where(*_published_clauses(), Document.published_date.is_not(None))
            .order_by(year.desc())
        )
        result = await self._session.execute(stmt)
        return [int(value) for value in result.scalars().all()]

    @storage_guard
    async def count_published_since(self, since: datetime) -> int:
        """Number of published documents created at or after `since`."""
        stmt = count_rows(published_documents().where(Document.created_at >= since))
        return (await self._session.execute(stmt)).scalar_one()

    @storage_guard
    async def get_statistics(self) -> CatalogStatistics:
        """Portal-wide published/active counts."""
        total_documents = (await self._session.execute(count_rows(published_documents()))).scalar_one()
        total_types = await self._session.scalar(
            select(func.count()).select_from(DocumentType).where(DocumentType.is_active.is_(True))
        )
        total_subjects = await self._session.scalar(
            select(func.count()).select_from(Subject).where(Subject.is_active.is_(True))
        )
        total_authors = await self._session.scalar(
            select(func.count()).select_from(Author).where(Author.is_active.is_(True))
        )
        by_type = await self.list_document_types()

        return CatalogStatistics(
            total_documents=total_documents,
            total_types=total_types or 0,
            total_subjects=total_subjects or 0,
            total_authors=total_authors or 0,
            documents_by_type=by_type,
        )
