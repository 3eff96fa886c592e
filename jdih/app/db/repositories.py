"""Repository protocol interfaces for data access."""

from datetime import datetime
from typing import Protocol

from jdih.app.models.catalog import (
    AuthorListing,
    CatalogStatistics,
    DocumentRecord,
    DocumentTypeCount,
    SubjectNode,
    SubjectTrail,
)
from jdih.app.search.query import DocumentQuery, PageRequest


class DocumentRepository(Protocol):
    """Read access to published documents plus the two counters.

    Every returned DocumentRecord has type, status, authors (pivot order)
    and subjects populated. Unpublished and tombstoned documents are never
    returned.
    """

    async def find_published(
        self, query: DocumentQuery, page: PageRequest
    ) -> tuple[list[DocumentRecord], int]:
        """Find published documents matching the query.

        Args:
            query: Filters and ordering
            page: Offset/limit window

        Returns:
            (items in the window, total matching count); ([], 0) when nothing matches
        """
        ...

    async def find_by_slugs(self, type_slug: str, document_slug: str) -> DocumentRecord:
        """Resolve a document by its type slug and its own slug.

        Raises:
            NotFoundError: If the type, or the document within that type, does not
                resolve to a published document
        """
        ...

    async def get_published(self, document_id: int) -> DocumentRecord:
        """Get a published document by id.

        Raises:
            NotFoundError: If absent or not published
        """
        ...

    async def get_published_by_slug(self, slug: str) -> DocumentRecord:
        """Get a published document by its slug.

        Raises:
            NotFoundError: If absent or not published
        """
        ...

    async def find_related(self, document: DocumentRecord, limit: int) -> list[DocumentRecord]:
        """Other published documents sharing the type or any subject.

        Ordered by published_date descending, ties by id ascending.
        """
        ...

    async def find_abstracts(self, page: PageRequest) -> tuple[list[DocumentRecord], int]:
        """Published documents that carry an abstract, ordered by id."""
        ...

    async def find_featured(self, limit: int) -> list[DocumentRecord]:
        """Featured published documents, newest published first."""
        ...

    async def find_latest(self, limit: int) -> list[DocumentRecord]:
        """Newest published documents."""
        ...

    async def increment_view_count(self, document_id: int) -> int | None:
        """Atomically add one to view_count.

        Returns:
            New count, or None if the document does not exist
        """
        ...

    async def increment_download_count(self, document_id: int) -> int | None:
        """Atomically add one to download_count.

        Returns:
            New count, or None if the document does not exist
        """
        ...

    async def list_document_types(self) -> list[DocumentTypeCount]:
        """Active document types with published document counts."""
        ...

    async def list_subject_tree(self) -> list[SubjectNode]:
        """Active root subjects with their active descendants."""
        ...

    async def list_authors(self, page: PageRequest) -> tuple[list[AuthorListing], int]:
        """Active authors ordered by name."""
        ...

    async def subject_trails(self, subject_ids: list[int]) -> list[SubjectTrail]:
        """Breadcrumbs for the given subjects, in the given order."""
        ...

    async def available_years(self) -> list[int]:
        """Distinct years of published documents, newest first."""
        ...

    async def count_published_since(self, since: datetime) -> int:
        """Number of published documents created at or after `since`."""
        ...

    async def get_statistics(self) -> CatalogStatistics:
        """Portal-wide published/active counts."""
        ...
