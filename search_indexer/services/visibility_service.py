"""Selection of the (version, project, owner) triples eligible for indexing.

A version is indexed when its project's status is searchable and its own
status is not hidden. The author shown in search is the project team's
owner, falling back to the owning organization's team owner.
"""

import logging
from typing import NamedTuple, Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from ..models import Organization, Project, TeamMember, User, Version
from ..models.status import ProjectStatus, VersionStatus
from .exceptions import IndexingError

logger = logging.getLogger(__name__)


class VisibleEntity(NamedTuple):
    """A (version, project) pair to index, with its resolved author."""

    version_id: int
    project_id: int
    owner_username: str


def resolve_owner(
    team_owner: Optional[str],
    organization_owner: Optional[str],
) -> str:
    """
    Resolve the author username of a project.

    First match wins: the project team's owner, then the organization
    team's owner. A team owner with an empty username still wins. A
    project with neither resolves to the empty string, which is
    indistinguishable from an owner with an empty username.
    """
    if team_owner is not None:
        return team_owner
    if organization_owner is not None:
        return organization_owner
    return ""


class VisibleEntitySelector:
    """Queries the store for every indexable (version, project, owner)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _build_query(self):
        team_member = aliased(TeamMember)
        team_user = aliased(User)
        org_member = aliased(TeamMember)
        org_user = aliased(User)

        return (
            select(
                Version.id.label("version_id"),
                Project.id.label("project_id"),
                team_user.username.label("team_owner"),
                org_user.username.label("organization_owner"),
            )
            .select_from(Version)
            .join(
                Project,
                and_(
                    Version.mod_id == Project.id,
                    Project.status.in_(ProjectStatus.searchable()),
                ),
            )
            .outerjoin(
                team_member,
                and_(
                    team_member.team_id == Project.team_id,
                    team_member.is_owner.is_(True),
                    team_member.accepted.is_(True),
                ),
            )
            .outerjoin(team_user, team_member.user_id == team_user.id)
            .outerjoin(Organization, Organization.id == Project.organization_id)
            .outerjoin(
                org_member,
                and_(
                    org_member.team_id == Organization.team_id,
                    org_member.is_owner.is_(True),
                    org_member.accepted.is_(True),
                ),
            )
            .outerjoin(org_user, org_member.user_id == org_user.id)
            .where(Version.status.notin_(VersionStatus.hidden()))
            .group_by(Version.id, Project.id, team_user.username, org_user.username)
            .order_by(
                Project.id.desc(),
                Version.id.desc(),
                team_user.username,
                org_user.username,
            )
        )

    async def get_all_visible(self) -> list[VisibleEntity]:
        """
        Fetch all visible entities, ordered by project id then version id
        (both descending).

        Returns:
            One VisibleEntity per version. A team with several owners
            yields the owner whose row sorts first.

        Raises:
            IndexingError: If the store query fails
        """
        try:
            result = await self.db.execute(self._build_query())
            rows = result.all()
        except SQLAlchemyError as exc:
            raise IndexingError(f"Failed to select visible entities: {exc}") from exc

        # Ownership joins can fan out; keep the first row per version
        visible: dict[int, VisibleEntity] = {}
        for row in rows:
            entity = VisibleEntity(
                version_id=row.version_id,
                project_id=row.project_id,
                owner_username=resolve_owner(row.team_owner, row.organization_owner),
            )
            visible.setdefault(entity.version_id, entity)

        logger.info("Selected %d visible versions for indexing", len(visible))
        return list(visible.values())
