"""Stored form of a sweepstake pool."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    JSON,
    String,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column

from ..db.utils import dt_iso, ensure_utc
from .base import Base
from .pool import Outcome, Pairing, Participant, Pool, PoolStatus, PrizeShare
from .types import DecimalText

logger = logging.getLogger(__name__)


class PoolNotFoundError(LookupError):
    """Raised when no stored sweepstake matches the requested id."""

    def __init__(self, pool_id: str) -> None:
        self.pool_id = pool_id
        super().__init__(f"Sweepstake {pool_id} not found")


class SweepstakeRecord(Base):
    """One row per pool holding the latest snapshot written by the caller."""

    __tablename__ = "sweepstakes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    """Pool identifier, e.g. ``SWP-4fQ0...``."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    entry_fee: Mapped[Decimal] = mapped_column(DecimalText(40), nullable=False)
    """Entry fee kept as exact decimal text."""

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="setup")
    """Lifecycle tag ("setup", "active" or "completed")."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """Creation time of the pool. Never rewritten by :meth:`save`."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    """Timestamp bumped each time a new snapshot is written."""

    prize_shares: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """``[{"place": 1, "percentage": "60"}, ...]``"""

    competitor_pool: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    participants: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    pairings: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    outcomes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """``[{"participant": ..., "competitor": ..., "place": 1, "winnings": "24.00"}]``"""

    __table_args__ = (
        CheckConstraint("status IN ('setup','active','completed')", name="status_enum"),
        Index("ix_sweepstakes_created_at", "created_at"),
    )

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<SweepstakeRecord(id={self.id}, name={self.name!r}, status='{self.status}')>"

    def apply_pool(self, pool: Pool) -> None:
        """Overwrite the stored columns with ``pool``'s fields."""
        self.name = pool.name
        self.entry_fee = pool.entry_fee
        self.status = pool.status.value
        self.prize_shares = [
            {"place": share.place, "percentage": str(share.percentage)}
            for share in pool.prize_shares
        ]
        self.competitor_pool = list(pool.competitor_pool)
        self.participants = [
            {"name": participant.name, "has_paid": participant.has_paid}
            for participant in pool.participants
        ]
        self.pairings = [
            {"participant": pairing.participant, "competitor": pairing.competitor}
            for pairing in pool.pairings
        ]
        self.outcomes = [
            {
                "participant": outcome.participant,
                "competitor": outcome.competitor,
                "place": outcome.place,
                "winnings": str(outcome.winnings),
            }
            for outcome in pool.outcomes
        ]

    @classmethod
    def from_pool(cls, pool: Pool) -> "SweepstakeRecord":
        record = cls(id=pool.id, created_at=pool.created_at)
        record.apply_pool(pool)
        return record

    def to_pool(self) -> Pool:
        """Rebuild the immutable :class:`Pool` this row was written from."""
        return Pool(
            id=self.id,
            name=self.name,
            entry_fee=Decimal(self.entry_fee),
            prize_shares=tuple(
                PrizeShare(place=item["place"], percentage=Decimal(item["percentage"]))
                for item in self.prize_shares
            ),
            competitor_pool=tuple(self.competitor_pool),
            created_at=ensure_utc(self.created_at),
            status=PoolStatus(self.status),
            participants=tuple(
                Participant(name=item["name"], has_paid=bool(item["has_paid"]))
                for item in self.participants
            ),
            pairings=tuple(
                Pairing(participant=item["participant"], competitor=item["competitor"])
                for item in self.pairings
            ),
            outcomes=tuple(
                Outcome(
                    participant=item["participant"],
                    competitor=item["competitor"],
                    place=item["place"],
                    winnings=Decimal(item["winnings"]),
                )
                for item in self.outcomes
            ),
        )

    @classmethod
    def save(cls, session: Session, pool: Pool) -> "SweepstakeRecord":
        """Insert or overwrite the row for ``pool.id``.

        The last snapshot written wins; no version check is performed.
        """

        record = session.get(cls, pool.id)
        if record is None:
            record = cls.from_pool(pool)
            session.add(record)
            logger.debug(f"Storing new sweepstake {pool.id}")
        else:
            record.apply_pool(pool)
            logger.debug(f"Overwriting sweepstake {pool.id} ({pool.status.value})")
        session.flush()
        return record

    @classmethod
    def get(cls, session: Session, pool_id: str) -> Pool:
        """Return the stored pool for ``pool_id``.

        Raises
        ------
        PoolNotFoundError
            If no row exists for ``pool_id``.
        """

        record = session.get(cls, pool_id)
        if record is None:
            raise PoolNotFoundError(pool_id)
        return record.to_pool()

    @classmethod
    def find(cls, session: Session, pool_id: str) -> Optional[Pool]:
        record = session.get(cls, pool_id)
        return None if record is None else record.to_pool()

    @classmethod
    def load_all(cls, session: Session) -> list[Pool]:
        """Return every stored pool, oldest first."""
        stmt = select(cls).order_by(cls.created_at.asc(), cls.id.asc())
        return [record.to_pool() for record in session.scalars(stmt)]

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "entry_fee": str(self.entry_fee),
            "status": self.status,
            "created_at": dt_iso(self.created_at),
            "updated_at": dt_iso(self.updated_at),
            "prize_shares": list(self.prize_shares),
            "competitor_pool": list(self.competitor_pool),
            "participants": list(self.participants),
            "pairings": list(self.pairings),
            "outcomes": list(self.outcomes),
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_json())


__all__ = ["PoolNotFoundError", "SweepstakeRecord"]
