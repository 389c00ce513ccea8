"""Loader field SQLAlchemy models.

Loader fields are typed, version-scoped metadata fields (game versions,
environment flags, modpack loaders, ...). Each stored value row carries
the payload in the column matching the field type:

- integer / array_integer / boolean / array_boolean -> int_value
  (booleans are stored as 0/1)
- text / array_text -> string_value
- enum / array_enum -> enum_value (FK to loader_field_enum_values)

Array-typed fields store one row per element.
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from ..database import Base


class LoaderField(Base):
    """
    Definition of a loader field.

    Attributes:
        id: Unique identifier
        field: Field name, e.g. "game_versions" or "client_only"
        field_type: One of LoaderFieldType values
        enum_type: Enum id for enum-typed fields (nullable)
    """

    __tablename__ = "loader_fields"

    id = Column(Integer, primary_key=True, autoincrement=False)
    field = Column(String(255), nullable=False, index=True)
    field_type = Column(String(64), nullable=False)
    enum_type = Column(Integer, nullable=True)

    def __repr__(self) -> str:
        """String representation of LoaderField."""
        return f"<LoaderField(id={self.id}, field={self.field}, field_type={self.field_type})>"


class LoaderFieldEnumValue(Base):
    """A permitted value of an enum-typed loader field."""

    __tablename__ = "loader_field_enum_values"

    id = Column(Integer, primary_key=True, autoincrement=False)
    enum_id = Column(Integer, nullable=False, index=True)
    value = Column(String(255), nullable=False)
    ordering = Column(Integer, nullable=True)


class VersionField(Base):
    """One stored value of a loader field for a version."""

    __tablename__ = "version_fields"

    id = Column(Integer, primary_key=True)
    version_id = Column(
        BigInteger,
        ForeignKey("versions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field_id = Column(
        Integer,
        ForeignKey("loader_fields.id", ondelete="CASCADE"),
        nullable=False,
    )
    int_value = Column(Integer, nullable=True)
    string_value = Column(String(2048), nullable=True)
    enum_value = Column(
        Integer,
        ForeignKey("loader_field_enum_values.id", ondelete="CASCADE"),
        nullable=True,
    )
