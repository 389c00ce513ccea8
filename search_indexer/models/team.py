"""Team, TeamMember and Organization SQLAlchemy models.

Project ownership is expressed through teams: every project has a team,
and optionally belongs to an organization, which has its own team. The
owner of a team is its accepted member flagged ``is_owner``.
"""

from sqlalchemy import BigInteger, Boolean, Column, ForeignKey, String

from ..database import Base


class Team(Base):
    """A group of users that jointly own a project or organization."""

    __tablename__ = "teams"

    id = Column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    def __repr__(self) -> str:
        """String representation of Team."""
        return f"<Team(id={self.id})>"


class TeamMember(Base):
    """
    Membership of a user in a team.

    Attributes:
        id: Unique identifier
        team_id: FK to the team
        user_id: FK to the member user
        is_owner: Whether this member owns the team
        accepted: Whether the user accepted the invitation
    """

    __tablename__ = "team_members"

    id = Column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    team_id = Column(
        BigInteger,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    is_owner = Column(
        Boolean,
        nullable=False,
        default=False,
    )
    accepted = Column(
        Boolean,
        nullable=False,
        default=False,
    )

    def __repr__(self) -> str:
        """String representation of TeamMember."""
        return (
            f"<TeamMember(team_id={self.team_id}, user_id={self.user_id}, "
            f"is_owner={self.is_owner}, accepted={self.accepted})>"
        )


class Organization(Base):
    """
    Organization owning one or more projects through its own team.

    Attributes:
        id: Unique identifier
        slug: URL slug
        name: Display name
        team_id: FK to the organization's team
    """

    __tablename__ = "organizations"

    id = Column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    slug = Column(
        String(255),
        nullable=False,
        unique=True,
    )
    name = Column(
        String(255),
        nullable=False,
    )

    team_id = Column(
        BigInteger,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation of Organization."""
        return f"<Organization(id={self.id}, slug={self.slug})>"
