"""Project SQLAlchemy models.

The projects table is historically named ``mods``. Categories, gallery
images and external links hang off it through their own tables.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """
    Project model representing a published content project.

    Attributes:
        id: Unique identifier (64-bit id)
        name: Display name
        summary: Short description
        slug: URL slug (nullable)
        license: License expression string, e.g. "MIT" or "LGPL-3.0-only"
        license_url: Optional link to a custom license text
        icon_url: Optional icon image URL
        color: Dominant icon color as a packed RGB integer
        team_id: FK to the owning team
        organization_id: FK to the owning organization (nullable)
        thread_id: Moderation thread id
        status: Current status (see ProjectStatus)
        requested_status: Status requested on approval (nullable)
        follows: Follower count
        downloads: Download count
        approved: Approval timestamp (nullable)
        published: Creation timestamp
        updated: Last modification timestamp
        queued: Moderation queue timestamp (nullable)
        monetization_status: Monetization state, e.g. "monetized"
    """

    __tablename__ = "mods"

    id = Column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    name = Column(String(255), nullable=False)
    summary = Column(String(2048), nullable=False, default="")
    slug = Column(String(255), nullable=True, unique=True)

    license = Column(String(2048), nullable=False, default="LicenseRef-All-Rights-Reserved")
    license_url = Column(String(2048), nullable=True)
    icon_url = Column(String(2048), nullable=True)
    color = Column(Integer, nullable=True)

    team_id = Column(
        BigInteger,
        ForeignKey("teams.id"),
        nullable=False,
        index=True,
    )
    organization_id = Column(
        BigInteger,
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    thread_id = Column(BigInteger, nullable=False)

    status = Column(String(128), nullable=False, index=True)
    requested_status = Column(String(128), nullable=True)

    follows = Column(Integer, nullable=False, default=0)
    downloads = Column(Integer, nullable=False, default=0)

    approved = Column(DateTime(timezone=True), nullable=True)
    published = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    queued = Column(DateTime(timezone=True), nullable=True)

    monetization_status = Column(String(64), nullable=False, default="monetized")

    def __repr__(self) -> str:
        """String representation of Project."""
        return f"<Project(id={self.id}, slug={self.slug}, status={self.status})>"


class Category(Base):
    """A searchable project category (e.g. "adventure", "technology")."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=False)
    category = Column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        """String representation of Category."""
        return f"<Category(id={self.id}, category={self.category})>"


class ProjectCategory(Base):
    """
    Association between a project and a category.

    Attributes:
        joining_mod_id: FK to the project
        joining_category_id: FK to the category
        is_additional: Secondary categories are searchable but not displayed
    """

    __tablename__ = "mods_categories"

    joining_mod_id = Column(
        BigInteger,
        ForeignKey("mods.id", ondelete="CASCADE"),
        primary_key=True,
    )
    joining_category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    )
    is_additional = Column(Boolean, nullable=False, default=False)


class GalleryItem(Base):
    """
    Gallery image attached to a project.

    Attributes:
        id: Unique identifier
        mod_id: FK to the project
        image_url: Public image URL
        featured: Whether this image is the project's featured image
        name: Optional caption title
        description: Optional caption text
        created: Upload timestamp
        ordering: Display position
    """

    __tablename__ = "mods_gallery"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    mod_id = Column(
        BigInteger,
        ForeignKey("mods.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url = Column(String(2048), nullable=False)
    featured = Column(Boolean, nullable=False, default=False)
    name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    created = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    ordering = Column(BigInteger, nullable=False, default=0)


class LinkPlatform(Base):
    """External link platform (e.g. "issues", "source", "discord")."""

    __tablename__ = "link_platforms"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, unique=True)


class ProjectLink(Base):
    """External link of a project on a given platform."""

    __tablename__ = "mods_links"

    joining_mod_id = Column(
        BigInteger,
        ForeignKey("mods.id", ondelete="CASCADE"),
        primary_key=True,
    )
    joining_platform_id = Column(
        Integer,
        ForeignKey("link_platforms.id", ondelete="CASCADE"),
        primary_key=True,
    )
    url = Column(String(2048), nullable=False)
