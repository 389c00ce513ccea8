"""Primary-store queries that hydrate project and version records.

Each fetch takes a batch of ids and returns the records it could find;
ids with no matching row are simply absent from the result.
"""

from collections import defaultdict
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import (
    Category,
    GalleryItem,
    Game,
    LinkPlatform,
    Loader,
    LoaderField,
    LoaderFieldEnumValue,
    LoaderGame,
    LoaderProjectType,
    LoaderVersion,
    Project,
    ProjectCategory,
    ProjectLink,
    ProjectType,
    Version,
    VersionField,
)
from ..schemas.records import (
    GalleryItemRecord,
    LoaderFieldType,
    ProjectRecord,
    VersionFieldRecord,
    VersionRecord,
)


# ---- Projects ----

async def _project_categories(
    db: AsyncSession, project_ids: list[int]
) -> tuple[dict[int, list[str]], dict[int, list[str]]]:
    """Return (categories, additional_categories) keyed by project id."""
    result = await db.execute(
        select(
            ProjectCategory.joining_mod_id,
            Category.category,
            ProjectCategory.is_additional,
        )
        .join(Category, ProjectCategory.joining_category_id == Category.id)
        .where(ProjectCategory.joining_mod_id.in_(project_ids))
        .order_by(ProjectCategory.joining_mod_id, Category.category)
    )
    categories: dict[int, list[str]] = defaultdict(list)
    additional: dict[int, list[str]] = defaultdict(list)
    for mod_id, category, is_additional in result.all():
        (additional if is_additional else categories)[mod_id].append(category)
    return categories, additional


async def _project_version_ids(
    db: AsyncSession, project_ids: list[int]
) -> dict[int, list[int]]:
    """All version ids of each project, oldest first, whatever their status."""
    result = await db.execute(
        select(Version.mod_id, Version.id)
        .where(Version.mod_id.in_(project_ids))
        .order_by(Version.mod_id, Version.date_published, Version.id)
    )
    version_ids: dict[int, list[int]] = defaultdict(list)
    for mod_id, version_id in result.all():
        version_ids[mod_id].append(version_id)
    return version_ids


async def _project_gallery(
    db: AsyncSession, project_ids: list[int]
) -> dict[int, list[GalleryItemRecord]]:
    result = await db.execute(
        select(GalleryItem)
        .where(GalleryItem.mod_id.in_(project_ids))
        .order_by(GalleryItem.mod_id, GalleryItem.ordering, GalleryItem.id)
    )
    gallery: dict[int, list[GalleryItemRecord]] = defaultdict(list)
    for item in result.scalars().all():
        gallery[item.mod_id].append(
            GalleryItemRecord(
                image_url=item.image_url,
                featured=item.featured,
                name=item.name,
                description=item.description,
                created=item.created,
                ordering=item.ordering,
            )
        )
    return gallery


async def _project_links(
    db: AsyncSession, project_ids: list[int]
) -> dict[int, dict[str, str]]:
    result = await db.execute(
        select(ProjectLink.joining_mod_id, LinkPlatform.name, ProjectLink.url)
        .join(LinkPlatform, ProjectLink.joining_platform_id == LinkPlatform.id)
        .where(ProjectLink.joining_mod_id.in_(project_ids))
        .order_by(ProjectLink.joining_mod_id, LinkPlatform.name)
    )
    links: dict[int, dict[str, str]] = defaultdict(dict)
    for mod_id, platform, url in result.all():
        links[mod_id][platform] = url
    return links


async def _project_loader_facets(
    db: AsyncSession, project_ids: list[int]
) -> tuple[dict[int, list[str]], dict[int, list[str]]]:
    """Return (project_types, games) keyed by project id.

    Both are derived from the loaders of all of the project's versions.
    """
    result = await db.execute(
        select(Version.mod_id, ProjectType.name)
        .join(LoaderVersion, LoaderVersion.version_id == Version.id)
        .join(LoaderProjectType, LoaderProjectType.joining_loader_id == LoaderVersion.loader_id)
        .join(ProjectType, ProjectType.id == LoaderProjectType.joining_project_type_id)
        .where(Version.mod_id.in_(project_ids))
        .distinct()
        .order_by(Version.mod_id, ProjectType.name)
    )
    project_types: dict[int, list[str]] = defaultdict(list)
    for mod_id, name in result.all():
        project_types[mod_id].append(name)

    result = await db.execute(
        select(Version.mod_id, Game.slug)
        .join(LoaderVersion, LoaderVersion.version_id == Version.id)
        .join(LoaderGame, LoaderGame.loader_id == LoaderVersion.loader_id)
        .join(Game, Game.id == LoaderGame.game_id)
        .where(Version.mod_id.in_(project_ids))
        .distinct()
        .order_by(Version.mod_id, Game.slug)
    )
    games: dict[int, list[str]] = defaultdict(list)
    for mod_id, slug in result.all():
        games[mod_id].append(slug)

    return project_types, games


async def fetch_projects(db: AsyncSession, project_ids: list[int]) -> list[ProjectRecord]:
    """
    Hydrate project records for a batch of ids.

    Args:
        db: Database session
        project_ids: Ids to look up

    Returns:
        Records for the ids that exist, in id order
    """
    if not project_ids:
        return []

    result = await db.execute(
        select(Project).where(Project.id.in_(project_ids)).order_by(Project.id)
    )
    projects = result.scalars().all()
    if not projects:
        return []

    found_ids = [project.id for project in projects]
    categories, additional = await _project_categories(db, found_ids)
    version_ids = await _project_version_ids(db, found_ids)
    gallery = await _project_gallery(db, found_ids)
    links = await _project_links(db, found_ids)
    project_types, games = await _project_loader_facets(db, found_ids)

    return [
        ProjectRecord(
            id=project.id,
            name=project.name,
            summary=project.summary,
            slug=project.slug,
            categories=categories.get(project.id, []),
            additional_categories=additional.get(project.id, []),
            license=project.license,
            license_url=project.license_url,
            icon_url=project.icon_url,
            color=project.color,
            team_id=project.team_id,
            organization_id=project.organization_id,
            thread_id=project.thread_id,
            status=project.status,
            requested_status=project.requested_status,
            follows=project.follows,
            downloads=project.downloads,
            approved_at=project.approved,
            published_at=project.published,
            updated_at=project.updated,
            queued_at=project.queued,
            monetization_status=project.monetization_status,
            project_types=project_types.get(project.id, []),
            games=games.get(project.id, []),
            links=links.get(project.id, {}),
            gallery_items=gallery.get(project.id, []),
            version_ids=version_ids.get(project.id, []),
        )
        for project in projects
    ]


# ---- Versions ----

def _row_value(field_type: LoaderFieldType, row) -> Optional[Any]:
    """Extract the typed payload of one version_fields row."""
    if field_type.is_boolean:
        return None if row.int_value is None else bool(row.int_value)
    if field_type in (LoaderFieldType.INTEGER, LoaderFieldType.ARRAY_INTEGER):
        return row.int_value
    if field_type in (LoaderFieldType.ENUM, LoaderFieldType.ARRAY_ENUM):
        return row.enum_value
    return row.string_value


async def _version_fields(
    db: AsyncSession, version_ids: list[int]
) -> dict[int, list[VersionFieldRecord]]:
    """Typed loader fields of each version.

    Array-typed fields are stored one row per element and are grouped
    back into a single record per (version, field).
    """
    result = await db.execute(
        select(
            VersionField.version_id,
            VersionField.field_id,
            LoaderField.field,
            LoaderField.field_type,
            VersionField.int_value,
            VersionField.string_value,
            LoaderFieldEnumValue.value.label("enum_value"),
        )
        .join(LoaderField, LoaderField.id == VersionField.field_id)
        .outerjoin(LoaderFieldEnumValue, LoaderFieldEnumValue.id == VersionField.enum_value)
        .where(VersionField.version_id.in_(version_ids))
        .order_by(VersionField.version_id, VersionField.field_id, VersionField.id)
    )

    grouped: dict[tuple[int, int], dict] = {}
    for row in result.all():
        field_type = LoaderFieldType(row.field_type)
        value = _row_value(field_type, row)
        if value is None:
            continue
        entry = grouped.setdefault(
            (row.version_id, row.field_id),
            {"name": row.field, "type": field_type, "values": []},
        )
        entry["values"].append(value)

    fields: dict[int, list[VersionFieldRecord]] = defaultdict(list)
    for (version_id, field_id), entry in grouped.items():
        field_type = entry["type"]
        fields[version_id].append(
            VersionFieldRecord(
                field_id=field_id,
                field_name=entry["name"],
                field_type=field_type,
                value=entry["values"] if field_type.is_array else entry["values"][0],
            )
        )
    return fields


async def fetch_versions(db: AsyncSession, version_ids: list[int]) -> list[VersionRecord]:
    """
    Hydrate version records for a batch of ids.

    Args:
        db: Database session
        version_ids: Ids to look up

    Returns:
        Records for the ids that exist, in id order
    """
    if not version_ids:
        return []

    result = await db.execute(
        select(Version.id, Version.mod_id, Version.status)
        .where(Version.id.in_(version_ids))
        .order_by(Version.id)
    )
    versions = result.all()
    if not versions:
        return []

    found_ids = [row.id for row in versions]

    result = await db.execute(
        select(LoaderVersion.version_id, Loader.loader)
        .join(Loader, Loader.id == LoaderVersion.loader_id)
        .where(LoaderVersion.version_id.in_(found_ids))
        .order_by(LoaderVersion.version_id, Loader.loader)
    )
    loaders: dict[int, list[str]] = defaultdict(list)
    for version_id, loader in result.all():
        loaders[version_id].append(loader)

    result = await db.execute(
        select(LoaderVersion.version_id, ProjectType.name)
        .join(LoaderProjectType, LoaderProjectType.joining_loader_id == LoaderVersion.loader_id)
        .join(ProjectType, ProjectType.id == LoaderProjectType.joining_project_type_id)
        .where(LoaderVersion.version_id.in_(found_ids))
        .distinct()
        .order_by(LoaderVersion.version_id, ProjectType.name)
    )
    project_types: dict[int, list[str]] = defaultdict(list)
    for version_id, name in result.all():
        project_types[version_id].append(name)

    fields = await _version_fields(db, found_ids)

    return [
        VersionRecord(
            id=row.id,
            project_id=row.mod_id,
            status=row.status,
            loaders=loaders.get(row.id, []),
            project_types=project_types.get(row.id, []),
            version_fields=fields.get(row.id, []),
        )
        for row in versions
    ]
