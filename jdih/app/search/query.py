"""Filter policy: request parameters -> validated DocumentQuery."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from starlette.datastructures import QueryParams

from jdih.app.errors import QueryValidationError


class SortOrder(str, Enum):
    """Recognized search orderings."""

    relevance = "relevance"
    date_desc = "date_desc"
    date_asc = "date_asc"
    title = "title"
    views = "views"

    @classmethod
    def parse(cls, value: str | None) -> "SortOrder":
        """Parse a sort value; anything unrecognized is relevance."""
        if not value:
            return cls.relevance
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.relevance


@dataclass(frozen=True)
class DocumentQuery:
    """Filters and ordering for a published-document query.

    All set filters are combined with AND. document_type and subject hold
    either a numeric id or a slug. A sort of None keeps insertion order.
    """

    q: str | None = None
    document_type: str | None = None
    subject: str | None = None
    year: int | None = None
    updated_since: datetime | None = None
    sort: SortOrder | None = SortOrder.relevance

    @property
    def text(self) -> str | None:
        """Search term with surrounding whitespace removed, None when blank."""
        if self.q is None:
            return None
        term = self.q.strip()
        return term or None


@dataclass(frozen=True)
class PageRequest:
    """Offset/limit window."""

    offset: int = 0
    limit: int = 20

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise QueryValidationError("offset", "must be greater than or equal to 0")
        if self.limit < 1:
            raise QueryValidationError("limit", "must be greater than or equal to 1")

    @classmethod
    def for_page(cls, page: int, per_page: int) -> "PageRequest":
        """Window for a 1-based page number."""
        if page < 1:
            raise QueryValidationError("page", "must be greater than or equal to 1")
        return cls(offset=(page - 1) * per_page, limit=per_page)


def reject_repeated_params(params: QueryParams, names: Iterable[str]) -> None:
    """Fail when any single-valued parameter was supplied more than once.

    Raises:
        QueryValidationError: naming the first repeated parameter.
    """
    for name in names:
        if len(params.getlist(name)) > 1:
            raise QueryValidationError(name, "multiple values are not supported")


def identifier_is_id(value: str) -> bool:
    """True when a type/subject identifier refers to a numeric id."""
    return value.isdigit()
