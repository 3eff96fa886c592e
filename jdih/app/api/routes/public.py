"""Public JSON API - /v1/documents, /v1/document-types, /v1/subjects, ..."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from jdih.app.api.deps import AppSettings, Repository, Tracker, single_valued
from jdih.app.models.catalog import (
    AuthorListing,
    CatalogStatistics,
    DocumentRecord,
    DocumentTypeCount,
    Page,
    SubjectNode,
)
from jdih.app.search.query import DocumentQuery, PageRequest, SortOrder
from jdih.app.tracking.counters import CounterKind

router = APIRouter(prefix="/v1", tags=["public"])


class ViewTrackedResponse(BaseModel):
    """Response for POST /v1/documents/{slug}/view."""

    success: bool
    view_count: int


@router.post("/documents/{slug}/view", response_model=ViewTrackedResponse)
async def track_view(
    slug: str,
    repository: Repository,
    tracker: Tracker,
) -> ViewTrackedResponse:
    """Count one view of a published document.

    The increment is awaited for a bounded time; on failure or timeout the
    last read count is returned with success=false.
    """
    document = await repository.get_published_by_slug(slug)

    new_count = await tracker.increment_within_timeout(document.id, CounterKind.view)
    if new_count is None:
        return ViewTrackedResponse(success=False, view_count=document.view_count)

    return ViewTrackedResponse(success=True, view_count=new_count)


@router.get(
    "/documents",
    response_model=Page[DocumentRecord],
    dependencies=[Depends(single_valued("q", "type", "page"))],
)
async def list_documents(
    repository: Repository,
    settings: AppSettings,
    q: Annotated[str | None, Query(max_length=255)] = None,
    document_type: Annotated[str | None, Query(alias="type", max_length=255)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
) -> Page[DocumentRecord]:
    """Published documents, newest published first."""
    per_page = settings.public_api_page_size
    query = DocumentQuery(q=q, document_type=document_type, sort=SortOrder.date_desc)

    documents, total = await repository.find_published(query, PageRequest.for_page(page, per_page))
    return Page[DocumentRecord](data=documents, total=total, page=page, per_page=per_page)


@router.get("/documents/{document_id}", response_model=DocumentRecord)
async def get_document(document_id: int, repository: Repository) -> DocumentRecord:
    """Published document detail; 404 when absent or unpublished."""
    return await repository.get_published(document_id)


@router.get("/document-types", response_model=list[DocumentTypeCount])
async def list_document_types(repository: Repository) -> list[DocumentTypeCount]:
    """Active document types with published document counts."""
    return await repository.list_document_types()


@router.get("/subjects", response_model=list[SubjectNode])
async def list_subjects(repository: Repository) -> list[SubjectNode]:
    """Active subject tree."""
    return await repository.list_subject_tree()


@router.get(
    "/authors",
    response_model=Page[AuthorListing],
    dependencies=[Depends(single_valued("page"))],
)
async def list_authors(
    repository: Repository,
    settings: AppSettings,
    page: Annotated[int, Query(ge=1)] = 1,
) -> Page[AuthorListing]:
    """Active authors ordered by name."""
    per_page = settings.authors_page_size
    authors, total = await repository.list_authors(PageRequest.for_page(page, per_page))
    return Page[AuthorListing](data=authors, total=total, page=page, per_page=per_page)


@router.get("/statistics", response_model=CatalogStatistics)
async def statistics(repository: Repository) -> CatalogStatistics:
    """Portal-wide counts."""
    return await repository.get_statistics()
