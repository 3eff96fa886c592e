"""Catalog domain models returned by the document repository."""

import math
import re
from datetime import date, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, computed_field

_TAG_RE = re.compile(r"<[^>]+>")
EXCERPT_LENGTH = 150

T = TypeVar("T")


class DocumentTypeSummary(BaseModel):
    """Document type as attached to a document."""

    id: int
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None


class DocumentStatusSummary(BaseModel):
    """Document status as attached to a document."""

    id: int
    name: str
    slug: str
    color: str | None = None
    is_published: bool


class AuthorCredit(BaseModel):
    """Author of a document with pivot attributes."""

    id: int
    name: str
    slug: str
    institution: str | None = None
    position: str | None = None
    role: str | None = None
    sort_order: int = 0


class SubjectSummary(BaseModel):
    """Subject attached to a document."""

    id: int
    name: str
    slug: str
    code: str | None = None
    parent_id: int | None = None


class DocumentRecord(BaseModel):
    """Document with type, status, authors and subjects loaded."""

    id: int
    title: str
    slug: str
    abstract: str | None = None
    content: str | None = None
    note: str | None = None
    document_number: str | None = None
    call_number: str | None = None
    teu_number: str | None = None
    language: str | None = None
    source: str | None = None
    location: str | None = None
    published_date: date | None = None
    effective_date: date | None = None
    expired_date: date | None = None
    meta_description: str | None = None
    keywords: str | None = None
    is_featured: bool = False
    view_count: int = 0
    download_count: int = 0
    file_path: str | None = Field(default=None, exclude=True)
    file_format: str = "pdf"
    created_at: datetime
    updated_at: datetime

    document_type: DocumentTypeSummary | None = None
    document_status: DocumentStatusSummary | None = None
    authors: list[AuthorCredit] = Field(default_factory=list)
    subjects: list[SubjectSummary] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def excerpt(self) -> str | None:
        """Abstract stripped of markup, cut to EXCERPT_LENGTH characters."""
        if self.abstract is None:
            return None
        text = _TAG_RE.sub("", self.abstract)
        if len(text) <= EXCERPT_LENGTH:
            return text
        return text[:EXCERPT_LENGTH].rstrip() + "..."

    @property
    def is_published(self) -> bool:
        return self.document_status is not None and self.document_status.is_published


class SubjectTrail(BaseModel):
    """Subject with its root-to-leaf breadcrumb."""

    subject: SubjectSummary
    breadcrumb: str


class DocumentTypeCount(BaseModel):
    """Active document type with number of published documents."""

    id: int
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    sort_order: int = 0
    documents_count: int = 0


class SubjectNode(BaseModel):
    """Subject tree node with published document count."""

    id: int
    name: str
    slug: str
    code: str | None = None
    description: str | None = None
    documents_count: int = 0
    children: list["SubjectNode"] = Field(default_factory=list)


class AuthorListing(BaseModel):
    """Active author with number of published documents."""

    id: int
    name: str
    slug: str
    institution: str | None = None
    position: str | None = None
    documents_count: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.institution})" if self.institution else self.name


class CatalogStatistics(BaseModel):
    """Portal-wide counts."""

    total_documents: int
    total_types: int
    total_subjects: int
    total_authors: int
    documents_by_type: list[DocumentTypeCount]


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing."""

    data: list[T]
    total: int
    page: int
    per_page: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))
