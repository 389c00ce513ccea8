"""Pydantic schema for the denormalized search document."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from .records import GalleryItemRecord


class LegacySideType(str, Enum):
    """Client/server support flag of the legacy (v2) search API."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


class SearchDocument(BaseModel):
    """
    Self-contained search document for one visible (version, project) pair.

    Ids are base62 strings. ``date_created``/``created_timestamp`` and
    ``date_modified``/``modified_timestamp`` carry the same instants as a
    datetime and as epoch seconds.
    """

    version_id: str
    project_id: str
    name: str
    summary: str
    categories: list[str]
    display_categories: list[str]
    follows: int
    downloads: int
    icon_url: Optional[str] = None
    author: str
    date_created: datetime
    created_timestamp: int
    date_modified: datetime
    modified_timestamp: int
    license: str
    license_url: Optional[str] = None
    open_source: bool
    slug: Optional[str] = None
    project_types: list[str]
    gallery: list[str]
    featured_gallery: Optional[str] = None
    color: Optional[int] = None
    loader_fields: dict[str, list[Any]] = Field(default_factory=dict)
    monetization_status: Optional[str] = None
    team_id: str
    organization_id: Optional[str] = None
    thread_id: str
    versions: list[str]
    date_published: datetime
    date_queued: Optional[datetime] = None
    status: str
    requested_status: Optional[str] = None
    games: list[str]
    links: dict[str, str]
    gallery_items: list[GalleryItemRecord]
    loaders: list[str]

    def to_search_payload(self) -> dict:
        """JSON-ready dict for submission to the search engine."""
        return self.model_dump(mode="json")
