"""Registry of competitors offered to new sweepstakes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base


class Horse(Base):
    """A competitor name available for the next pool to snapshot."""

    __tablename__ = "horses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key. Also records registration order."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Competitor name as shown to participants."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (UniqueConstraint("name", name="horses_name_key"),)

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<Horse(id={self.id}, name={self.name!r})>"

    @classmethod
    def get_by_name(cls, session: Session, name: str) -> Optional["Horse"]:
        """Return the horse registered as ``name`` if it exists."""

        return session.scalar(select(cls).where(cls.name == name))

    @classmethod
    def ordered_names(cls, session: Session) -> list[str]:
        """Return registered names in the order they were added."""

        return list(session.scalars(select(cls.name).order_by(cls.id.asc())))
