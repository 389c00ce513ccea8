"""SQLAlchemy ORM models package."""

from .loader_field import LoaderField, LoaderFieldEnumValue, VersionField
from .project import (
    Category,
    GalleryItem,
    LinkPlatform,
    Project,
    ProjectCategory,
    ProjectLink,
)
from .status import ProjectStatus, VersionStatus
from .team import Organization, Team, TeamMember
from .user import User
from .version import (
    Game,
    Loader,
    LoaderGame,
    LoaderProjectType,
    LoaderVersion,
    ProjectType,
    Version,
)

__all__ = [
    "Category",
    "GalleryItem",
    "Game",
    "LinkPlatform",
    "Loader",
    "LoaderField",
    "LoaderFieldEnumValue",
    "LoaderGame",
    "LoaderProjectType",
    "LoaderVersion",
    "Organization",
    "Project",
    "ProjectCategory",
    "ProjectLink",
    "ProjectStatus",
    "ProjectType",
    "Team",
    "TeamMember",
    "User",
    "Version",
    "VersionField",
    "VersionStatus",
]
