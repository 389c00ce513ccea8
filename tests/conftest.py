"""Shared pytest fixtures for indexer tests."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from search_indexer.database import Base
from search_indexer.models import (
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
    Organization,
    Project,
    ProjectCategory,
    ProjectLink,
    ProjectType,
    Team,
    TeamMember,
    User,
    Version,
    VersionField,
)

BASE_TIME = datetime(2023, 1, 1, tzinfo=timezone.utc)


# File-backed SQLite: the batch loader opens concurrent sessions
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with async SQLite."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


def _lookup_rows() -> list:
    """Loaders, project types, games, categories and loader fields."""
    return [
        Loader(id=1, loader="fabric"),
        Loader(id=2, loader="forge"),
        Loader(id=3, loader="mrpack"),
        Loader(id=4, loader="datapack"),
        ProjectType(id=1, name="mod"),
        ProjectType(id=2, name="modpack"),
        ProjectType(id=3, name="datapack"),
        LoaderProjectType(joining_loader_id=1, joining_project_type_id=1),
        LoaderProjectType(joining_loader_id=2, joining_project_type_id=1),
        LoaderProjectType(joining_loader_id=3, joining_project_type_id=2),
        LoaderProjectType(joining_loader_id=4, joining_project_type_id=3),
        Game(id=1, slug="minecraft-java"),
        *[LoaderGame(loader_id=loader_id, game_id=1) for loader_id in (1, 2, 3, 4)],
        Category(id=1, category="adventure"),
        Category(id=2, category="technology"),
        Category(id=3, category="magic"),
        LinkPlatform(id=1, name="issues"),
        LinkPlatform(id=2, name="source"),
        LoaderField(id=1, field="game_versions", field_type="array_enum", enum_type=1),
        LoaderField(id=2, field="client_only", field_type="boolean"),
        LoaderField(id=3, field="server_only", field_type="boolean"),
        LoaderField(id=4, field="singleplayer", field_type="boolean"),
        LoaderField(id=5, field="client_and_server", field_type="boolean"),
        LoaderField(id=6, field="mrpack_loaders", field_type="array_enum", enum_type=2),
        LoaderFieldEnumValue(id=1, enum_id=1, value="1.20.1", ordering=1),
        LoaderFieldEnumValue(id=2, enum_id=1, value="1.20.2", ordering=2),
        LoaderFieldEnumValue(id=3, enum_id=2, value="fabric", ordering=1),
        LoaderFieldEnumValue(id=4, enum_id=2, value="quilt", ordering=2),
    ]


def _ownership_rows() -> list:
    """
    Users, teams and one organization.

    team 10: alice owns (accepted)
    team 11: no owner
    team 12: organization team, bob owns
    team 13: carol owns but never accepted
    """
    return [
        User(id=1, username="alice"),
        User(id=2, username="bob"),
        User(id=3, username="carol"),
        *[Team(id=team_id) for team_id in (10, 11, 12, 13)],
        TeamMember(id=1, team_id=10, user_id=1, is_owner=True, accepted=True),
        TeamMember(id=2, team_id=11, user_id=3, is_owner=False, accepted=True),
        TeamMember(id=3, team_id=12, user_id=2, is_owner=True, accepted=True),
        TeamMember(id=4, team_id=13, user_id=3, is_owner=True, accepted=False),
        Organization(id=20, slug="tinkerers", name="Tinkerers", team_id=12),
    ]


def _project(project_id: int, name: str, status: str, team_id: int, **kwargs) -> Project:
    return Project(
        id=project_id,
        name=name,
        summary=f"{name} summary",
        slug=name.lower(),
        status=status,
        team_id=team_id,
        thread_id=project_id * 10,
        license=kwargs.pop("license", "MIT"),
        follows=kwargs.pop("follows", 5),
        downloads=kwargs.pop("downloads", 100),
        published=kwargs.pop("published", BASE_TIME),
        updated=kwargs.pop("updated", BASE_TIME + timedelta(days=30)),
        monetization_status="monetized",
        **kwargs,
    )


def _version(version_id: int, project_id: int, status: str, loader_ids: list[int]) -> list:
    rows = [
        Version(
            id=version_id,
            mod_id=project_id,
            name=f"v{version_id}",
            version_number=str(version_id),
            status=status,
            date_published=BASE_TIME + timedelta(minutes=version_id),
        )
    ]
    rows.extend(LoaderVersion(loader_id=loader_id, version_id=version_id) for loader_id in loader_ids)
    return rows


@pytest_asyncio.fixture
async def catalog(db_session: AsyncSession) -> SimpleNamespace:
    """
    Seed a small catalog.

    Visible (version, project, author) after filtering:
        (4001, 400, "")      -- owner never accepted, no organization
        (2000, 200, "bob")   -- archived project, organization owner
        (1002, 100, "alice")
        (1000, 100, "alice")

    Hidden: version 1001 (draft), version 4000 (unlisted), project 300
    (draft project) with its listed version 3000.
    """
    db_session.add_all(_lookup_rows())
    db_session.add_all(_ownership_rows())
    await db_session.flush()

    db_session.add_all([
        _project(
            100, "Alpha", "approved", 10,
            license="MIT OR Apache-2.0",
            approved=BASE_TIME + timedelta(days=2),
            color=0xFF8800,
            icon_url="https://cdn.example.com/alpha.png",
        ),
        _project(200, "Beta", "archived", 11, organization_id=20,
                 license="Proprietary No Redistribution"),
        _project(300, "Gamma", "draft", 10),
        _project(400, "Delta", "approved", 13, license=""),
    ])
    await db_session.flush()

    db_session.add_all([
        ProjectCategory(joining_mod_id=100, joining_category_id=1, is_additional=False),
        ProjectCategory(joining_mod_id=100, joining_category_id=3, is_additional=True),
        ProjectCategory(joining_mod_id=200, joining_category_id=2, is_additional=False),
        GalleryItem(
            id=1, mod_id=100, image_url="https://cdn.example.com/a1.png",
            featured=False, created=BASE_TIME, ordering=0,
        ),
        GalleryItem(
            id=2, mod_id=100, image_url="https://cdn.example.com/a2.png",
            featured=True, name="Banner", created=BASE_TIME, ordering=1,
        ),
        ProjectLink(joining_mod_id=100, joining_platform_id=1,
                    url="https://example.com/alpha/issues"),
        ProjectLink(joining_mod_id=100, joining_platform_id=2,
                    url="https://example.com/alpha/src"),
    ])

    db_session.add_all(_version(1000, 100, "listed", [1]))
    db_session.add_all(_version(1001, 100, "draft", [2]))
    db_session.add_all(_version(1002, 100, "listed", [2]))
    db_session.add_all(_version(2000, 200, "listed", [3]))
    db_session.add_all(_version(3000, 300, "listed", [1]))
    db_session.add_all(_version(4000, 400, "unlisted", [4]))
    db_session.add_all(_version(4001, 400, "listed", [4]))
    await db_session.flush()

    db_session.add_all([
        # 1000: fabric, two game versions, client only + singleplayer
        VersionField(version_id=1000, field_id=1, enum_value=1),
        VersionField(version_id=1000, field_id=1, enum_value=2),
        VersionField(version_id=1000, field_id=2, int_value=1),
        VersionField(version_id=1000, field_id=4, int_value=1),
        # 1002: forge, no environment fields
        VersionField(version_id=1002, field_id=1, enum_value=2),
        # 2000: modpack for fabric and quilt, runs on both sides
        VersionField(version_id=2000, field_id=1, enum_value=1),
        VersionField(version_id=2000, field_id=6, enum_value=3),
        VersionField(version_id=2000, field_id=6, enum_value=4),
        VersionField(version_id=2000, field_id=2, int_value=1),
        VersionField(version_id=2000, field_id=3, int_value=1),
        VersionField(version_id=2000, field_id=4, int_value=1),
    ])
    await db_session.commit()

    return SimpleNamespace(
        visible=[(4001, 400, ""), (2000, 200, "bob"), (1002, 100, "alice"), (1000, 100, "alice")],
        hidden_versions={1001, 3000, 4000},
        base_time=BASE_TIME,
    )
