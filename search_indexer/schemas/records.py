"""Pydantic schemas for hydrated project and version records.

These are the cacheable, store-independent shapes the batch loader
returns. They round-trip through the Redis cache as JSON.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class LoaderFieldType(str, Enum):
    """Storage type of a loader field."""

    INTEGER = "integer"
    TEXT = "text"
    ENUM = "enum"
    BOOLEAN = "boolean"
    ARRAY_INTEGER = "array_integer"
    ARRAY_TEXT = "array_text"
    ARRAY_ENUM = "array_enum"
    ARRAY_BOOLEAN = "array_boolean"

    @property
    def is_array(self) -> bool:
        return self.value.startswith("array_")

    @property
    def is_boolean(self) -> bool:
        return self in (LoaderFieldType.BOOLEAN, LoaderFieldType.ARRAY_BOOLEAN)


class VersionFieldRecord(BaseModel):
    """
    A typed loader field value attached to a version.

    Enum values are held by their string value. Array-typed fields hold a
    list of the element type.
    """

    model_config = ConfigDict(frozen=True)

    field_id: int
    field_name: str
    field_type: LoaderFieldType
    value: Any

    def serialize_internal(self) -> Any:
        """Return the JSON-compatible value of this field."""
        if self.field_type.is_array:
            values = list(self.value or [])
            if self.field_type.is_boolean:
                return [bool(v) for v in values]
            return values
        if self.field_type.is_boolean:
            return bool(self.value)
        return self.value


class GalleryItemRecord(BaseModel):
    """Gallery image of a project."""

    image_url: str
    featured: bool = False
    name: Optional[str] = None
    description: Optional[str] = None
    created: datetime
    ordering: int = 0


class ProjectRecord(BaseModel):
    """
    Hydrated project record.

    ``version_ids`` lists every version ever associated with the project,
    regardless of the versions' own visibility.
    """

    id: int
    name: str
    summary: str = ""
    slug: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    additional_categories: list[str] = Field(default_factory=list)
    license: str
    license_url: Optional[str] = None
    icon_url: Optional[str] = None
    color: Optional[int] = None
    team_id: int
    organization_id: Optional[int] = None
    thread_id: int
    status: str
    requested_status: Optional[str] = None
    follows: int = 0
    downloads: int = 0
    approved_at: Optional[datetime] = None
    published_at: datetime
    updated_at: datetime
    queued_at: Optional[datetime] = None
    monetization_status: str
    project_types: list[str] = Field(default_factory=list)
    games: list[str] = Field(default_factory=list)
    links: dict[str, str] = Field(default_factory=dict)
    gallery_items: list[GalleryItemRecord] = Field(default_factory=list)
    version_ids: list[int] = Field(default_factory=list)


class VersionRecord(BaseModel):
    """Hydrated version record."""

    id: int
    project_id: int
    status: str
    loaders: list[str] = Field(default_factory=list)
    project_types: list[str] = Field(default_factory=list)
    version_fields: list[VersionFieldRecord] = Field(default_factory=list)
