"""Pydantic schemas for records and search documents."""

from .records import (
    GalleryItemRecord,
    LoaderFieldType,
    ProjectRecord,
    VersionFieldRecord,
    VersionRecord,
)
from .search import LegacySideType, SearchDocument

__all__ = [
    "GalleryItemRecord",
    "LegacySideType",
    "LoaderFieldType",
    "ProjectRecord",
    "SearchDocument",
    "VersionFieldRecord",
    "VersionRecord",
]
