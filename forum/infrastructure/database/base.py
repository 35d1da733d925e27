"""SQLAlchemy declarative base and common model fields.

Every table of the forum derives from BaseModel, which gives it an
auto-incrementing integer key and server-side creation and update timestamps.
Constraint names follow NAMING_CONVENTION so they are predictable in error
messages and when tables are recreated.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from forum.infrastructure.constants import NAMING_CONVENTION


class Base(DeclarativeBase):
    """Declarative base carrying the shared metadata."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class BaseModel(Base):
    """Abstract model with an integer id and audit timestamps."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return the model class name and id."""
        return f"<{self.__class__.__name__}(id={self.id})>"
