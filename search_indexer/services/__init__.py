"""Indexing services."""

from .document_assembler import DocumentAssembler
from .entity_loader import EntityBatchLoader
from .exceptions import IndexingError, SearchPublishError
from .indexing_service import index_local
from .legacy_side_mapper import convert_side_types, get_legacy_project_type
from .license_service import LicenseClassifier, license_classifier, primary_license
from .loader_field_service import reconcile_loader_fields
from .redis_service import RedisService, redis_service
from .visibility_service import VisibleEntity, VisibleEntitySelector, resolve_owner

__all__ = [
    "DocumentAssembler",
    "EntityBatchLoader",
    "IndexingError",
    "LicenseClassifier",
    "RedisService",
    "SearchPublishError",
    "VisibleEntity",
    "VisibleEntitySelector",
    "convert_side_types",
    "get_legacy_project_type",
    "index_local",
    "license_classifier",
    "primary_license",
    "reconcile_loader_fields",
    "redis_service",
    "resolve_owner",
]
