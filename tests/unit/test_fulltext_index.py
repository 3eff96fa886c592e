"""Test the PostgreSQL full-text index on documents."""

from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex

from jdih.app.db.models import Document, document_fulltext_index


def test_index_is_gin_over_title_abstract_content() -> None:
    ddl = str(CreateIndex(document_fulltext_index).compile(dialect=postgresql.dialect()))

    assert "CREATE INDEX idx_document_fulltext ON documents USING gin" in ddl
    assert "to_tsvector('simple'" in ddl
    for column in ("title", "abstract", "content"):
        assert f"coalesce({column}, '')" in ddl


def test_index_belongs_to_documents() -> None:
    assert document_fulltext_index in Document.__table__.indexes

