"""User SQLAlchemy model (only the columns the indexer reads)."""

from sqlalchemy import BigInteger, Column, String

from ..database import Base


class User(Base):
    """
    User model.

    Attributes:
        id: Unique identifier (64-bit id)
        username: Public username, used as the search document author
    """

    __tablename__ = "users"

    id = Column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    username = Column(
        String(255),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, username={self.username})>"
