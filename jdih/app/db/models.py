"""SQLAlchemy ORM models for the document catalog."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
import sqlalchemy.dialects.postgresql  # noqa: F401  # registers to_tsvector types for func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """created_at/updated_at columns maintained by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


document_subject = Table(
    "document_subject",
    Base.metadata,
    Column(
        "document_id",
        Integer,
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "subject_id",
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("created_at", DateTime(timezone=True), server_default=func.now(), nullable=True),
)


class User(Base):
    """Back-office account referenced as document creator/updater."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class DocumentType(TimestampMixin, Base):
    """Document type (peraturan, putusan, monografi, artikel, ...)."""

    __tablename__ = "document_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(255), nullable=True)
    metadata_schema: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    documents: Mapped[list["Document"]] = relationship("Document", back_populates="document_type")


class DocumentStatus(TimestampMixin, Base):
    """Workflow status; is_published gates public visibility."""

    __tablename__ = "document_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    documents: Mapped[list["Document"]] = relationship(
        "Document", back_populates="document_status"
    )


class Author(TimestampMixin, Base):
    """Document author (person or institution)."""

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    institution: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    document_links: Mapped[list["DocumentAuthor"]] = relationship(
        "DocumentAuthor", back_populates="author", cascade="all, delete-orphan"
    )


class Subject(TimestampMixin, Base):
    """Legal subject (bidang hukum); parent_id forms a tree."""

    __tablename__ = "subjects"
    __table_args__ = (Index("idx_subject_parent", "parent_id", "sort_order"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    parent: Mapped["Subject | None"] = relationship(
        "Subject", remote_side="Subject.id", back_populates="children"
    )
    children: Mapped[list["Subject"]] = relationship(
        "Subject",
        back_populates="parent",
        order_by=lambda: (Subject.sort_order, Subject.name),
    )
    documents: Mapped[list["Document"]] = relationship(
        "Document", secondary=document_subject, back_populates="subjects"
    )


class DocumentAuthor(Base):
    """Document/author pivot carrying display order and role."""

    __tablename__ = "document_author"
    __table_args__ = (
        UniqueConstraint("document_id", "author_id", name="uq_document_author"),
        Index("idx_document_author_role", "author_id", "role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("authors.id", ondelete="CASCADE"), nullable=False
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # primary_author, co_author, editor, ...
    role: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    document: Mapped["Document"] = relationship("Document", back_populates="author_links")
    author: Mapped["Author"] = relationship("Author", back_populates="document_links")


class Document(TimestampMixin, Base):
    """Legal document - the catalog's central record."""

    __tablename__ = "documents"
    __table_args__ = (
        Index("idx_document_type_status", "document_type_id", "document_status_id"),
        Index("idx_document_published_featured", "published_date", "is_featured"),
        Index("idx_document_creator", "created_by", "created_at"),
        Index("idx_document_jdihn_id", "jdihn_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    abstract: Mapped[str | None] = mapped_column(Text, nullable=True)
    document_number: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    call_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Terbitan, Edisi, Update number
    teu_number: Mapped[str | None] = mapped_column(String(255), nullable=True)

    document_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("document_types.id"), nullable=False
    )
    document_status_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("document_statuses.id"), nullable=False
    )
    created_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    updated_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )

    language: Mapped[str | None] = mapped_column(String(10), default="id", nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # JDIHN sync metadata
    jdihn_metadata: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    jdihn_last_sync: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    jdihn_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    jdihn_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    published_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    effective_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    expired_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    slug: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Comma-delimited
    keywords: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    download_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Stored file, relative to Settings.storage_root
    file_path: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    file_format: Mapped[str] = mapped_column(String(10), default="pdf", nullable=False)

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    document_type: Mapped["DocumentType"] = relationship(
        "DocumentType", back_populates="documents"
    )
    document_status: Mapped["DocumentStatus"] = relationship(
        "DocumentStatus", back_populates="documents"
    )
    author_links: Mapped[list["DocumentAuthor"]] = relationship(
        "DocumentAuthor",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by=[DocumentAuthor.sort_order, DocumentAuthor.author_id],
    )
    subjects: Mapped[list["Subject"]] = relationship(
        "Subject",
        secondary=document_subject,
        back_populates="documents",
        order_by=[document_subject.c.created_at, document_subject.c.subject_id],
    )
    sync_logs: Mapped[list["JdihnSyncLog"]] = relationship(
        "JdihnSyncLog", back_populates="document", cascade="all, delete-orphan"
    )


def _search_text() -> Any:
    """title, abstract and content joined for full-text matching."""
    return (
        func.coalesce(Document.title, "")
        + " "
        + func.coalesce(Document.abstract, "")
        + " "
        + func.coalesce(Document.content, "")
    )


# PostgreSQL only; SQLite has no tsvector
document_fulltext_index = Index(
    "idx_document_fulltext",
    func.to_tsvector("simple", _search_text()),
    postgresql_using="gin",
).ddl_if(dialect="postgresql")


class JdihnSyncLog(TimestampMixin, Base):
    """Outbound JDIHN sync attempt. Written by the external sync engine."""

    __tablename__ = "jdihn_sync_logs"
    __table_args__ = (
        Index("idx_sync_document_status", "document_id", "status"),
        Index("idx_sync_status_retry", "status", "next_retry_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )
    # create, update, delete
    sync_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # pending, success, failed, retry
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    request_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    response_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    jdihn_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    retry_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    next_retry_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    document: Mapped["Document"] = relationship("Document", back_populates="sync_logs")
