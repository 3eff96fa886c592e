"""Subject hierarchy helpers."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

BREADCRUMB_SEPARATOR = " > "


@dataclass(frozen=True)
class SubjectLink:
    """Name and parent pointer of one subject."""

    name: str
    parent_id: int | None


def ancestor_names(subject_id: int, index: Mapping[int, SubjectLink]) -> list[str]:
    """Names from the root down to `subject_id`.

    Stops at a missing parent. A cycle in parent pointers is logged and the
    walk stops at the first repeated subject.

    Args:
        subject_id: Leaf subject
        index: All known subjects by id

    Returns:
        Root-to-leaf list of names (empty if subject_id is unknown)
    """
    names: list[str] = []
    seen: set[int] = set()
    current: int | None = subject_id

    while current is not None and current in index:
        if current in seen:
            logger.warning(
                "Subject hierarchy cycle detected",
                extra={"structured": {"subject_id": subject_id, "repeated_id": current}},
            )
            break
        seen.add(current)
        link = index[current]
        names.append(link.name)
        current = link.parent_id

    names.reverse()
    return names


def breadcrumb(subject_id: int, index: Mapping[int, SubjectLink]) -> str:
    """Root-to-leaf path joined with " > "."""
    return BREADCRUMB_SEPARATOR.join(ancestor_names(subject_id, index))
