"""Status enums for projects and versions, and the indexing visibility policy.

Statuses are stored as plain strings in the primary store. The policy
helpers here decide which statuses make a project searchable and which
hide a version from the index.
"""

from enum import Enum


class ProjectStatus(str, Enum):
    """Moderation/publication status of a project."""

    APPROVED = "approved"
    ARCHIVED = "archived"
    REJECTED = "rejected"
    DRAFT = "draft"
    UNLISTED = "unlisted"
    PROCESSING = "processing"
    WITHHELD = "withheld"
    SCHEDULED = "scheduled"
    PRIVATE = "private"
    UNKNOWN = "unknown"

    @property
    def is_searchable(self) -> bool:
        return self in (ProjectStatus.APPROVED, ProjectStatus.ARCHIVED)

    @classmethod
    def searchable(cls) -> list[str]:
        """Status strings of projects that may appear in search."""
        return [status.value for status in cls if status.is_searchable]


class VersionStatus(str, Enum):
    """Publication status of a single version."""

    LISTED = "listed"
    ARCHIVED = "archived"
    DRAFT = "draft"
    UNLISTED = "unlisted"
    SCHEDULED = "scheduled"
    UNKNOWN = "unknown"

    @property
    def is_hidden(self) -> bool:
        return self not in (VersionStatus.LISTED, VersionStatus.ARCHIVED)

    @classmethod
    def hidden(cls) -> list[str]:
        """Status strings of versions that are never indexed."""
        return [status.value for status in cls if status.is_hidden]

