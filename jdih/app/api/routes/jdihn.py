"""JDIHN national-network feed endpoints.

GET /v1/jdihn/documents, GET /v1/jdihn/documents/{id}, GET /v1/jdihn/abstracts.
Read-only: the feed never touches the view/download counters.
"""

from datetime import date, datetime, time, timezone
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from jdih.app.api.deps import AppSettings, Repository, single_valued
from jdih.app.feed.jdihn import (
    build_abstract_envelope,
    build_document_envelope,
    build_feed_envelope,
)
from jdih.app.models.jdihn import AbstractFeedEnvelope, FeedEnvelope, SingleDocumentEnvelope
from jdih.app.search.query import DocumentQuery, PageRequest
from jdih.app.utils.metrics import record_feed_served

router = APIRouter(prefix="/v1/jdihn", tags=["jdihn"])

FEED_MAX_LIMIT = 1000
FEED_MIN_YEAR = 1945
FEED_PARAMS = ("limit", "offset", "updated_since", "document_type", "region_code", "year")

JSON_UTF8 = "application/json; charset=utf-8"

JdihnDocumentType = Literal["peraturan", "putusan", "monografi", "artikel"]


def as_utc(value: date | datetime) -> datetime:
    """Normalize a date or datetime bound to an aware UTC datetime.

    A bare date means midnight UTC; naive datetimes are taken as UTC.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@router.get(
    "/documents",
    response_model=FeedEnvelope,
    dependencies=[Depends(single_valued(*FEED_PARAMS))],
)
async def list_documents(
    request: Request,
    repository: Repository,
    settings: AppSettings,
    limit: Annotated[int | None, Query(ge=1, le=FEED_MAX_LIMIT)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    updated_since: Annotated[datetime | date | None, Query()] = None,
    document_type: Annotated[JdihnDocumentType | None, Query()] = None,
    region_code: str | None = None,
    year: Annotated[int | None, Query(ge=FEED_MIN_YEAR)] = None,
) -> JSONResponse:
    """Paginated JDIHN feed of published documents.

    region_code is accepted for compatibility with JDIHN harvesters and has
    no filtering effect.
    """
    page = PageRequest(
        offset=offset,
        limit=limit if limit is not None else settings.feed_default_limit,
    )
    query = DocumentQuery(
        document_type=document_type,
        year=year,
        updated_since=as_utc(updated_since) if updated_since is not None else None,
        sort=None,
    )

    documents, total = await repository.find_published(query, page)
    envelope = build_feed_envelope(
        documents,
        total=total,
        offset=page.offset,
        limit=page.limit,
        url=request.url,
        default_language=settings.default_language,
    )
    record_feed_served("documents", len(documents))

    return JSONResponse(
        content=envelope.model_dump(mode="json"),
        headers={
            "Content-Type": JSON_UTF8,
            "X-JDIHN-Compliance": "verified",
            "Cache-Control": f"public, max-age={settings.feed_cache_max_age_sec}",
        },
    )


@router.get("/documents/{document_id}", response_model=SingleDocumentEnvelope)
async def get_document(
    document_id: int,
    repository: Repository,
    settings: AppSettings,
) -> JSONResponse:
    """Single published document in JDIHN shape; 404 when absent or unpublished."""
    document = await repository.get_published(document_id)
    envelope = build_document_envelope(document, default_language=settings.default_language)
    record_feed_served("document", 1)

    return JSONResponse(
        content=envelope.model_dump(mode="json"),
        headers={"Content-Type": JSON_UTF8, "X-JDIHN-Compliance": "verified"},
    )


@router.get(
    "/abstracts",
    response_model=AbstractFeedEnvelope,
    dependencies=[Depends(single_valued("limit", "offset"))],
)
async def list_abstracts(
    request: Request,
    repository: Repository,
    settings: AppSettings,
    limit: Annotated[int | None, Query(ge=1, le=FEED_MAX_LIMIT)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> JSONResponse:
    """Reduced feed of published documents that carry an abstract."""
    page = PageRequest(
        offset=offset,
        limit=limit if limit is not None else settings.feed_default_limit,
    )

    documents, total = await repository.find_abstracts(page)
    envelope = build_abstract_envelope(
        documents,
        total=total,
        offset=page.offset,
        limit=page.limit,
        url=request.url,
    )
    record_feed_served("abstracts", len(documents))

    return JSONResponse(
        content=envelope.model_dump(mode="json"),
        headers={"Content-Type": JSON_UTF8, "X-Feed-Type": "abstract"},
    )
