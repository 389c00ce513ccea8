"""Version SQLAlchemy models and the loader / project type / game lookups.

A version declares the loaders it runs on. Loaders in turn determine the
project types and games the version (and thereby its project) belongs to.
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String

from ..database import Base


class Version(Base):
    """
    A single uploaded version of a project.

    Attributes:
        id: Unique identifier (64-bit id)
        mod_id: FK to the project
        name: Display name
        version_number: Author-supplied version string
        status: Current status (see VersionStatus)
        date_published: Upload timestamp
    """

    __tablename__ = "versions"

    id = Column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    mod_id = Column(
        BigInteger,
        ForeignKey("mods.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(255), nullable=False, default="")
    version_number = Column(String(255), nullable=False, default="")
    status = Column(String(128), nullable=False, index=True)
    date_published = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation of Version."""
        return f"<Version(id={self.id}, mod_id={self.mod_id}, status={self.status})>"


class Loader(Base):
    """A platform/tooling compatibility identifier (e.g. "fabric", "forge")."""

    __tablename__ = "loaders"

    id = Column(Integer, primary_key=True, autoincrement=False)
    loader = Column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        """String representation of Loader."""
        return f"<Loader(id={self.id}, loader={self.loader})>"


class LoaderVersion(Base):
    """Association between a version and a loader it supports."""

    __tablename__ = "loaders_versions"

    loader_id = Column(
        Integer,
        ForeignKey("loaders.id", ondelete="CASCADE"),
        primary_key=True,
    )
    version_id = Column(
        BigInteger,
        ForeignKey("versions.id", ondelete="CASCADE"),
        primary_key=True,
    )


class ProjectType(Base):
    """A project type (e.g. "mod", "modpack", "resourcepack")."""

    __tablename__ = "project_types"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, unique=True)


class LoaderProjectType(Base):
    """Project types a loader makes a version eligible for."""

    __tablename__ = "loaders_project_types"

    joining_loader_id = Column(
        Integer,
        ForeignKey("loaders.id", ondelete="CASCADE"),
        primary_key=True,
    )
    joining_project_type_id = Column(
        Integer,
        ForeignKey("project_types.id", ondelete="CASCADE"),
        primary_key=True,
    )


class Game(Base):
    """A game a loader belongs to (e.g. "minecraft-java")."""

    __tablename__ = "games"

    id = Column(Integer, primary_key=True, autoincrement=False)
    slug = Column(String(255), nullable=False, unique=True)


class LoaderGame(Base):
    """Games a loader belongs to."""

    __tablename__ = "loaders_games"

    loader_id = Column(
        Integer,
        ForeignKey("loaders.id", ondelete="CASCADE"),
        primary_key=True,
    )
    game_id = Column(
        Integer,
        ForeignKey("games.id", ondelete="CASCADE"),
        primary_key=True,
    )
