"""Human-facing portal data: home, search, document detail and download.

The catch-all /{type_slug}/{document_slug} routes must be registered after
every other router.
"""

import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import FileResponse
from pydantic import BaseModel

from jdih.app.api.deps import AppSettings, Repository, Tracker, single_valued
from jdih.app.errors import FileMissingError
from jdih.app.models.catalog import (
    DocumentRecord,
    DocumentTypeCount,
    Page,
    SubjectNode,
    SubjectTrail,
)
from jdih.app.search.query import DocumentQuery, PageRequest, SortOrder

logger = logging.getLogger(__name__)

router = APIRouter(tags=["web"])

SEARCH_PARAMS = ("q", "document_type", "subject", "year", "sort", "page")


class HomeStats(BaseModel):
    """Headline numbers for the home page."""

    total_documents: int
    total_types: int
    total_subjects: int
    documents_this_month: int


class HomeResponse(BaseModel):
    """Response for GET /."""

    stats: HomeStats
    document_types: list[DocumentTypeCount]
    featured_documents: list[DocumentRecord]
    latest_documents: list[DocumentRecord]


class SearchFilters(BaseModel):
    """Filter options offered next to search results."""

    document_types: list[DocumentTypeCount]
    subjects: list[SubjectNode]
    years: list[int]


class AppliedSearch(BaseModel):
    """The search as it was applied, for re-rendering the form."""

    q: str | None = None
    document_type: str | None = None
    subject: str | None = None
    year: int | None = None
    sort: SortOrder


class SearchResponse(BaseModel):
    """Response for GET /search."""

    results: Page[DocumentRecord]
    filters: SearchFilters
    query: AppliedSearch


class DocumentDetailResponse(BaseModel):
    """Response for GET /{type_slug}/{document_slug}."""

    document: DocumentRecord
    subjects: list[SubjectTrail]
    related_documents: list[DocumentRecord]


@router.get("/", response_model=HomeResponse)
async def home(repository: Repository, settings: AppSettings) -> HomeResponse:
    """Home page: stats, busiest types, featured and latest documents."""
    statistics = await repository.get_statistics()
    month_start = datetime.now(timezone.utc).replace(
        day=1, hour=0, minute=0, second=0, microsecond=0
    )

    by_count = sorted(
        statistics.documents_by_type,
        key=lambda document_type: document_type.documents_count,
        reverse=True,
    )

    return HomeResponse(
        stats=HomeStats(
            total_documents=statistics.total_documents,
            total_types=statistics.total_types,
            total_subjects=statistics.total_subjects,
            documents_this_month=await repository.count_published_since(month_start),
        ),
        document_types=by_count[: settings.home_document_types_limit],
        featured_documents=await repository.find_featured(settings.featured_documents_limit),
        latest_documents=await repository.find_latest(settings.latest_documents_limit),
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    dependencies=[Depends(single_valued(*SEARCH_PARAMS))],
)
async def search(
    repository: Repository,
    settings: AppSettings,
    q: Annotated[str | None, Query(max_length=255)] = None,
    document_type: Annotated[str | None, Query(max_length=255)] = None,
    subject: Annotated[str | None, Query(max_length=255)] = None,
    year: Annotated[int | None, Query()] = None,
    sort: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
) -> SearchResponse:
    """Search published documents and list the available filters."""
    per_page = settings.search_page_size
    query = DocumentQuery(
        q=q,
        # Empty form fields mean "no filter"
        document_type=document_type or None,
        subject=subject or None,
        year=year,
        sort=SortOrder.parse(sort),
    )

    documents, total = await repository.find_published(query, PageRequest.for_page(page, per_page))

    return SearchResponse(
        results=Page[DocumentRecord](data=documents, total=total, page=page, per_page=per_page),
        filters=SearchFilters(
            document_types=await repository.list_document_types(),
            subjects=await repository.list_subject_tree(),
            years=await repository.available_years(),
        ),
        query=AppliedSearch(
            q=query.text,
            document_type=query.document_type,
            subject=query.subject,
            year=query.year,
            sort=query.sort,
        ),
    )


@router.get("/{type_slug}/{document_slug}", response_model=DocumentDetailResponse)
async def document_detail(
    type_slug: str,
    document_slug: str,
    background_tasks: BackgroundTasks,
    repository: Repository,
    tracker: Tracker,
    settings: AppSettings,
) -> DocumentDetailResponse:
    """Published document with subject breadcrumbs and related documents.

    Each render counts one view, applied after the response is sent.
    """
    document = await repository.find_by_slugs(type_slug, document_slug)

    response = DocumentDetailResponse(
        document=document,
        subjects=await repository.subject_trails([subject.id for subject in document.subjects]),
        related_documents=await repository.find_related(
            document, settings.related_documents_limit
        ),
    )

    background_tasks.add_task(tracker.record_view, document.id)
    return response


def stored_file(document: DocumentRecord, storage_root: str) -> Path:
    """Resolve the document's file inside the storage root.

    Raises:
        FileMissingError: If the document has no file, the path escapes the
            storage root, or nothing is stored there
    """
    if not document.file_path:
        raise FileMissingError()

    root = Path(storage_root).resolve()
    path = (root / document.file_path).resolve()
    if not path.is_relative_to(root) or not path.is_file():
        logger.warning(
            "Document file missing",
            extra={"structured": {"document_id": document.id, "file_path": document.file_path}},
        )
        raise FileMissingError()

    return path


def download_filename(document: DocumentRecord) -> str:
    """Download name: "{title}.{file_format}" with path separators replaced."""
    title = document.title.replace("/", "-").replace("\\", "-")
    return f"{title}.{document.file_format}"


@router.get("/{type_slug}/{document_slug}/download", response_class=FileResponse)
async def download(
    type_slug: str,
    document_slug: str,
    background_tasks: BackgroundTasks,
    repository: Repository,
    tracker: Tracker,
    settings: AppSettings,
) -> FileResponse:
    """Stream the stored file; counts a download only when the file exists."""
    document = await repository.find_by_slugs(type_slug, document_slug)
    path = stored_file(document, settings.storage_root)

    filename = download_filename(document)
    media_type, _ = mimetypes.guess_type(filename)

    background_tasks.add_task(tracker.record_download, document.id)
    return FileResponse(
        path,
        filename=filename,
        media_type=media_type or "application/octet-stream",
    )
