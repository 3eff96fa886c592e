"""Models package - re-exports for convenience."""

from jdih.app.models.catalog import (
    AuthorCredit,
    AuthorListing,
    CatalogStatistics,
    DocumentRecord,
    DocumentStatusSummary,
    DocumentTypeCount,
    DocumentTypeSummary,
    Page,
    SubjectNode,
    SubjectSummary,
    SubjectTrail,
)
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

__all__ = [
    "AbstractFeedEnvelope",
    "AbstractFeedMeta",
    "AbstractRecord",
    "AuthorCredit",
    "AuthorListing",
    "CatalogStatistics",
    "DocumentRecord",
    "DocumentStatusSummary",
    "DocumentTypeCount",
    "DocumentTypeSummary",
    "FeedEnvelope",
    "FeedLinks",
    "FeedMeta",
    "JdihnAuthor",
    "JdihnMetadata",
    "JdihnRecord",
    "JdihnSubject",
    "Page",
    "SingleDocumentEnvelope",
    "SingleDocumentMeta",
    "SubjectNode",
    "SubjectSummary",
    "SubjectTrail",
]
