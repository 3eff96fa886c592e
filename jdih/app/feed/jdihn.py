"""JDIHN feed transformer.

Pure mapping from DocumentRecord to the JDIHN contract. No I/O and no
counter side effects: transforming the same record twice yields the same
payload.
"""

import math
from datetime import date, datetime, timezone

from starlette.datastructures import URL

from jdih.app.models.catalog import DocumentRecord
from jdih.app.models.jdihn import (
    AbstractFeedEnvelope,
    AbstractFeedMeta,
    AbstractRecord,
    FeedEnvelope,
    FeedLinks,
    FeedMeta,
    JdihnAuthor,
    JdihnMetadata,
    JdihnRecord,
    JdihnSubject,
    SingleDocumentEnvelope,
    SingleDocumentMeta,
)

DEFAULT_LANGUAGE = "id"


def to_iso8601(value: datetime) -> str:
    """UTC ISO-8601 timestamp with a Z suffix; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def format_date(value: date | None) -> str | None:
    """YYYY-MM-DD or None."""
    return value.strftime("%Y-%m-%d") if value is not None else None


def split_keywords(keywords: str | None) -> list[str]:
    """Split a comma-delimited keyword string, trimming each entry.

    Empty entries are dropped; None or blank input yields [].
    """
    if not keywords:
        return []
    return [part.strip() for part in keywords.split(",") if part.strip()]


def _type_slug(document: DocumentRecord) -> str | None:
    return document.document_type.slug if document.document_type is not None else None


def _year(document: DocumentRecord) -> int | None:
    return document.published_date.year if document.published_date is not None else None


def to_jdihn_record(
    document: DocumentRecord, default_language: str = DEFAULT_LANGUAGE
) -> JdihnRecord:
    """Map a document with loaded relations to a JDIHN record.

    Args:
        document: Document with type, authors (pivot order) and subjects
        default_language: Value for bahasa when language is null/empty

    Returns:
        JDIHN record
    """
    return JdihnRecord(
        id=document.id,
        judul=document.title,
        abstrak=document.abstract,
        nomor_dokumen=document.document_number,
        nomor_panggil=document.call_number,
        teu=document.teu_number,
        jenis_dokumen=_type_slug(document),
        tahun_terbit=_year(document),
        tanggal_penetapan=format_date(document.effective_date),
        tanggal_pengundangan=format_date(document.published_date),
        pengarang=[
            JdihnAuthor(nama=author.name, institusi=author.institution, jabatan=author.position)
            for author in document.authors
        ],
        subjek=JdihnSubject(
            bidang_hukum=[subject.name for subject in document.subjects],
            kata_kunci=split_keywords(document.keywords),
        ),
        bahasa=document.language or default_language,
        lokasi=document.location,
        catatan=document.note,
        sumber=document.source,
        metadata=JdihnMetadata(
            created_at=to_iso8601(document.created_at),
            updated_at=to_iso8601(document.updated_at),
            view_count=document.view_count,
            download_count=document.download_count,
        ),
    )


def to_abstract_record(document: DocumentRecord) -> AbstractRecord:
    """Reduced record for the abstract feed."""
    return AbstractRecord(
        id=document.id,
        judul=document.title,
        abstrak=document.abstract,
        nomor_dokumen=document.document_number,
        jenis_dokumen=_type_slug(document),
        tahun_terbit=_year(document),
    )


def build_links(url: URL, offset: int, limit: int, total: int) -> FeedLinks:
    """Pagination links preserving every other query parameter of `url`.

    first is offset 0; prev only when offset > 0; next only when another
    page follows; last is floor(total / limit) * limit.
    """

    def at(target: int) -> str:
        return str(url.include_query_params(offset=target))

    return FeedLinks(
        first=at(0),
        prev=at(max(0, offset - limit)) if offset > 0 else None,
        next=at(offset + limit) if offset + limit < total else None,
        last=at(math.floor(total / limit) * limit),
    )


def build_feed_envelope(
    documents: list[DocumentRecord],
    *,
    total: int,
    offset: int,
    limit: int,
    url: URL,
    generated_at: datetime | None = None,
    default_language: str = DEFAULT_LANGUAGE,
) -> FeedEnvelope:
    """Envelope for GET /v1/jdihn/documents."""
    return FeedEnvelope(
        meta=FeedMeta(
            generated_at=to_iso8601(generated_at or datetime.now(timezone.utc)),
            total_records=total,
            offset=offset,
            limit=limit,
        ),
        data=[to_jdihn_record(document, default_language) for document in documents],
        links=build_links(url, offset, limit, total),
    )


def build_document_envelope(
    document: DocumentRecord,
    *,
    generated_at: datetime | None = None,
    default_language: str = DEFAULT_LANGUAGE,
) -> SingleDocumentEnvelope:
    """Envelope for GET /v1/jdihn/documents/{id}."""
    return SingleDocumentEnvelope(
        meta=SingleDocumentMeta(generated_at=to_iso8601(generated_at or datetime.now(timezone.utc))),
        data=to_jdihn_record(document, default_language),
    )


def build_abstract_envelope(
    documents: list[DocumentRecord],
    *,
    total: int,
    offset: int,
    limit: int,
    url: URL,
    generated_at: datetime | None = None,
) -> AbstractFeedEnvelope:
    """Envelope for GET /v1/jdihn/abstracts."""
    return AbstractFeedEnvelope(
        meta=AbstractFeedMeta(
            generated_at=to_iso8601(generated_at or datetime.now(timezone.utc)),
            total_records=total,
            offset=offset,
            limit=limit,
        ),
        data=[to_abstract_record(document) for document in documents],
        links=build_links(url, offset, limit, total),
    )
