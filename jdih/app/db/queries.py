"""Visibility-safe query helpers for the document catalog."""

from sqlalchemy import Select, extract, func, or_, select
from sqlalchemy.orm import selectinload

from jdih.app.db.models import Document, DocumentAuthor, DocumentStatus, DocumentType, Subject
from jdih.app.search.query import DocumentQuery, SortOrder, identifier_is_id


def published_documents() -> Select:
    """Select non-tombstoned documents whose status is published.

    Returns:
        Select over Document with the public visibility gate applied
    """
    return select(Document).where(
        Document.deleted_at.is_(None),
        Document.document_status.has(DocumentStatus.is_published.is_(True)),
    )


def with_relations(stmt: Select) -> Select:
    """Batch-load type, status, ordered authors and subjects."""
    return stmt.options(
        selectinload(Document.document_type),
        selectinload(Document.document_status),
        selectinload(Document.author_links).selectinload(DocumentAuthor.author),
        selectinload(Document.subjects),
    )


def apply_filters(stmt: Select, query: DocumentQuery) -> Select:
    """AND together every filter set on the query.

    Args:
        stmt: Select over Document
        query: Validated document query

    Returns:
        Filtered select
    """
    term = query.text
    if term is not None:
        stmt = stmt.where(
            or_(
                Document.title.icontains(term, autoescape=True),
                Document.content.icontains(term, autoescape=True),
                Document.abstract.icontains(term, autoescape=True),
                Document.keywords.icontains(term, autoescape=True),
                Document.document_number.icontains(term, autoescape=True),
            )
        )

    if query.document_type:
        if identifier_is_id(query.document_type):
            stmt = stmt.where(Document.document_type_id == int(query.document_type))
        else:
            stmt = stmt.where(Document.document_type.has(DocumentType.slug == query.document_type))

    if query.subject:
        if identifier_is_id(query.subject):
            stmt = stmt.where(Document.subjects.any(Subject.id == int(query.subject)))
        else:
            stmt = stmt.where(Document.subjects.any(Subject.slug == query.subject))

    if query.year is not None:
        # NULL published_date never equals a year
        stmt = stmt.where(extract("year", Document.published_date) == query.year)

    if query.updated_since is not None:
        stmt = stmt.where(Document.updated_at >= query.updated_since)

    return stmt


def apply_sort(stmt: Select, sort: SortOrder | None) -> Select:
    """Order a document select; every ordering ends on id for determinism.

    None keeps insertion order (id ascending). Undated documents sort after
    dated ones in every date ordering.
    """
    if sort is None:
        return stmt.order_by(Document.id.asc())

    undated_last = Document.published_date.is_(None).asc()

    if sort is SortOrder.date_desc:
        return stmt.order_by(undated_last, Document.published_date.desc(), Document.id.desc())
    if sort is SortOrder.date_asc:
        return stmt.order_by(undated_last, Document.published_date.asc(), Document.id.asc())
    if sort is SortOrder.title:
        return stmt.order_by(func.lower(Document.title).asc(), Document.id.asc())
    if sort is SortOrder.views:
        return stmt.order_by(Document.view_count.desc(), Document.id.desc())

    return stmt.order_by(
        Document.is_featured.desc(),
        undated_last,
        Document.published_date.desc(),
        Document.id.desc(),
    )


def count_rows(stmt: Select) -> Select:
    """COUNT(*) over a select, ignoring its ordering."""
    return select(func.count()).select_from(stmt.order_by(None).subquery())
