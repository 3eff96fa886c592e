"""JDIHN feed contract (version 2.0, data format JDIHN-2024).

Field names are fixed by the external JDIHN standard and must not change.
"""

from typing import Literal

from pydantic import BaseModel, Field

FEED_VERSION = "2.0"
FEED_DATA_FORMAT = "JDIHN-2024"


class JdihnAuthor(BaseModel):
    """Author entry (pengarang)."""

    nama: str = Field(..., description="Author name")
    institusi: str | None = Field(None, description="Author institution")
    jabatan: str | None = Field(None, description="Author position")


class JdihnSubject(BaseModel):
    """Subject block (subjek)."""

    bidang_hukum: list[str] = Field(default_factory=list, description="Legal subject names")
    kata_kunci: list[str] = Field(default_factory=list, description="Trimmed keywords")


class JdihnMetadata(BaseModel):
    """Record bookkeeping snapshot."""

    created_at: str = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: str = Field(..., description="ISO-8601 last update timestamp (UTC)")
    view_count: int = Field(..., ge=0)
    download_count: int = Field(..., ge=0)


class JdihnRecord(BaseModel):
    """One document in JDIHN shape."""

    id: int
    judul: str = Field(..., description="Title")
    abstrak: str | None = Field(None, description="Abstract")
    nomor_dokumen: str | None = Field(None, description="Document number")
    nomor_panggil: str | None = Field(None, description="Call number")
    teu: str | None = Field(None, description="TEU number")
    jenis_dokumen: str | None = Field(None, description="Document type slug")
    tahun_terbit: int | None = Field(None, description="Year of published_date")
    tanggal_penetapan: str | None = Field(None, description="Effective date, YYYY-MM-DD")
    tanggal_pengundangan: str | None = Field(None, description="Published date, YYYY-MM-DD")
    pengarang: list[JdihnAuthor] = Field(default_factory=list)
    subjek: JdihnSubject
    bahasa: str = Field("id", description="Language code")
    lokasi: str | None = None
    catatan: str | None = None
    sumber: str | None = None
    metadata: JdihnMetadata


class AbstractRecord(BaseModel):
    """Reduced record served by the abstract feed."""

    id: int
    judul: str
    abstrak: str | None = None
    nomor_dokumen: str | None = None
    jenis_dokumen: str | None = None
    tahun_terbit: int | None = None


class FeedLinks(BaseModel):
    """Pagination links; absent links serialize as null."""

    first: str
    prev: str | None = None
    next: str | None = None
    last: str


class FeedMeta(BaseModel):
    """List feed metadata."""

    version: str = FEED_VERSION
    generated_at: str
    total_records: int
    offset: int
    limit: int
    data_format: str = FEED_DATA_FORMAT


class FeedEnvelope(BaseModel):
    """GET /v1/jdihn/documents response."""

    meta: FeedMeta
    data: list[JdihnRecord]
    links: FeedLinks


class SingleDocumentMeta(BaseModel):
    """Single-document feed metadata."""

    version: str = FEED_VERSION
    generated_at: str
    compliance_checked: Literal[True] = True


class SingleDocumentEnvelope(BaseModel):
    """GET /v1/jdihn/documents/{id} response."""

    meta: SingleDocumentMeta
    data: JdihnRecord


class AbstractFeedMeta(BaseModel):
    """Abstract feed metadata."""

    version: str = FEED_VERSION
    type: Literal["abstract_feed"] = "abstract_feed"
    generated_at: str
    total_records: int
    offset: int
    limit: int


class AbstractFeedEnvelope(BaseModel):
    """GET /v1/jdihn/abstracts response."""

    meta: AbstractFeedMeta
    data: list[AbstractRecord]
    links: FeedLinks
