"""
Assembly of denormalized search documents from hydrated records.

One SearchDocument is built per visible (version, project) pair whose
project and version were both loaded; pairs missing either side are
skipped. Assembly is pure in-memory work and never fails per record.

Legacy compatibility rules applied on the way:

1. Version loaders double as search categories, and the categories
   shown to users (``display_categories``) are the base categories plus
   those loaders, without additional categories.
2. Modpacks declare their loaders through the ``mrpack_loaders`` loader
   field; those values become categories and replace the literal
   ``mrpack`` category.
3. ``client_side``/``server_side`` of the v2 API are derived from the
   environment loader fields and stored as loader fields.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from pydantic_core import PydanticSerializationError, to_jsonable_python

from ..schemas.records import GalleryItemRecord, ProjectRecord, VersionRecord
from ..schemas.search import SearchDocument
from ..utils.ids import to_base62
from .legacy_side_mapper import convert_side_types, get_legacy_project_type
from .license_service import LicenseClassifier, license_classifier, primary_license
from .loader_field_service import reconcile_loader_fields
from .visibility_service import VisibleEntity

logger = logging.getLogger(__name__)

MRPACK_LOADERS_FIELD = "mrpack_loaders"
MRPACK_CATEGORY = "mrpack"


# ---- Legacy category rules ----

def apply_loader_categories(
    categories: list[str],
    loaders: list[str],
    additional_categories: list[str],
) -> tuple[list[str], list[str]]:
    """
    Merge version loaders into the project's categories.

    Returns:
        Tuple of (categories, display_categories) where
        categories = categories + loaders + additional_categories and
        display_categories = categories + loaders
    """
    display_categories = [*categories, *loaders]
    return [*display_categories, *additional_categories], display_categories


def apply_mrpack_loader_categories(
    categories: list[str],
    loader_fields: Mapping[str, list[Any]],
) -> list[str]:
    """
    Turn modpack loaders into categories.

    If the ``mrpack_loaders`` field is present its string values are
    appended and every ``mrpack`` category is dropped; otherwise the
    categories are returned unchanged.
    """
    if MRPACK_LOADERS_FIELD not in loader_fields:
        return list(categories)

    mrpack_loaders = [
        value for value in loader_fields[MRPACK_LOADERS_FIELD] if isinstance(value, str)
    ]
    return [
        category
        for category in [*categories, *mrpack_loaders]
        if category != MRPACK_CATEGORY
    ]


# ---- Helpers ----

def _epoch_seconds(value: datetime) -> int:
    """Epoch seconds of a datetime; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def _split_gallery(items: list[GalleryItemRecord]) -> tuple[list[str], Optional[str]]:
    """Return (non-featured image urls, first featured image url or None)."""
    gallery = [item.image_url for item in items if not item.featured]
    featured = [item.image_url for item in items if item.featured]
    return gallery, (featured[0] if featured else None)


def aggregate_loaders(
    version_ids: Iterable[int],
    versions: Mapping[int, VersionRecord],
) -> list[str]:
    """Sorted, duplicate-free loaders across the loaded versions of a project."""
    loaders: set[str] = set()
    for version_id in version_ids:
        version = versions.get(version_id)
        if version is not None:
            loaders.update(version.loaders)
    return sorted(loaders)


class DocumentAssembler:
    """Builds search documents for visible entities."""

    def __init__(self, classifier: Optional[LicenseClassifier] = None) -> None:
        self._classifier = classifier or license_classifier

    def assemble(
        self,
        visible: Iterable[VisibleEntity],
        versions: Mapping[int, VersionRecord],
        projects: Mapping[int, ProjectRecord],
    ) -> list[SearchDocument]:
        """
        Build one document per visible entity whose records both resolved.

        Args:
            visible: Visible (version_id, project_id, owner_username) triples
            versions: Loaded versions by id
            projects: Loaded projects by id

        Returns:
            Documents in the order of the visible triples
        """
        documents: list[SearchDocument] = []
        skipped = 0

        for version_id, project_id, owner_username in visible:
            project = projects.get(project_id)
            version = versions.get(version_id)
            if project is None or version is None:
                logger.debug(
                    "Skipping version %s of project %s: record not loaded",
                    version_id, project_id,
                )
                skipped += 1
                continue

            documents.append(self.build_document(project, version, owner_username, versions))

        if skipped:
            logger.info("Skipped %d visible versions with unresolved records", skipped)
        return documents

    def build_document(
        self,
        project: ProjectRecord,
        version: VersionRecord,
        owner_username: str,
        versions: Mapping[int, VersionRecord],
    ) -> SearchDocument:
        """Build the search document of one (project, version) pair."""
        categories, display_categories = apply_loader_categories(
            project.categories, version.loaders, project.additional_categories
        )

        loader_fields, raw_fields = reconcile_loader_fields(version.version_fields)

        license_id = primary_license(project.license)
        open_source = self._classifier.is_open_source(license_id)

        loaders = aggregate_loaders(project.version_ids, versions)

        categories = apply_mrpack_loader_categories(categories, loader_fields)

        self._add_legacy_side_types(loader_fields, raw_fields, version)

        gallery, featured_gallery = _split_gallery(project.gallery_items)

        date_created = project.approved_at or project.published_at

        return SearchDocument(
            version_id=to_base62(version.id),
            project_id=to_base62(project.id),
            name=project.name,
            summary=project.summary,
            categories=categories,
            display_categories=display_categories,
            follows=project.follows,
            downloads=project.downloads,
            icon_url=project.icon_url,
            author=owner_username,
            date_created=date_created,
            created_timestamp=_epoch_seconds(date_created),
            date_modified=project.updated_at,
            modified_timestamp=_epoch_seconds(project.updated_at),
            license=license_id,
            license_url=project.license_url,
            open_source=open_source,
            slug=project.slug,
            project_types=list(project.project_types),
            gallery=gallery,
            featured_gallery=featured_gallery,
            color=project.color,
            loader_fields=loader_fields,
            monetization_status=project.monetization_status,
            team_id=to_base62(project.team_id),
            organization_id=(
                to_base62(project.organization_id)
                if project.organization_id is not None
                else None
            ),
            thread_id=to_base62(project.thread_id),
            versions=[to_base62(version_id) for version_id in project.version_ids],
            date_published=project.published_at,
            date_queued=project.queued_at,
            status=project.status,
            requested_status=project.requested_status,
            games=list(project.games),
            links=dict(project.links),
            gallery_items=list(project.gallery_items),
            loaders=loaders,
        )

    def _add_legacy_side_types(
        self,
        loader_fields: dict[str, list[Any]],
        raw_fields: Mapping[str, Any],
        version: VersionRecord,
    ) -> None:
        """Insert v2 client_side/server_side as single-value loader fields."""
        _, original_project_type = get_legacy_project_type(version.project_types)
        client_side, server_side = convert_side_types(raw_fields, original_project_type)

        for key, side in (("client_side", client_side), ("server_side", server_side)):
            try:
                loader_fields[key] = [to_jsonable_python(side)]
            except PydanticSerializationError as exc:
                logger.warning(
                    "Omitting %s for version %s: %s", key, version.id, exc
                )
