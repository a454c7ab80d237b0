"""Value types describing a single sweepstake and its derived views.

Every type here is an immutable dataclass. State changes happen in
:mod:`sweepstake.engine`, which returns new :class:`Pool` values built with
:func:`dataclasses.replace`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence

from ..db.utils import ensure_utc

HUNDRED = Decimal("100")


def to_decimal(value: object, *, label: str = "value") -> Decimal:
    """Coerce a numeric input into :class:`~decimal.Decimal`.

    Floats are converted through their ``str`` form so that ``0.1`` becomes
    ``Decimal("0.1")`` rather than its binary expansion.

    Raises
    ------
    TypeError
        If ``value`` is not an int, float, str or Decimal (booleans included).
    ValueError
        If ``value`` cannot be parsed or is not finite.
    """

    if isinstance(value, bool):
        raise TypeError(f"{label} must be a number, not bool")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"{label} is not a valid number: {value!r}") from exc
    else:
        raise TypeError(f"{label} must be a number, got {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"{label} must be finite")
    return result


class PoolStatus(str, enum.Enum):
    """Lifecycle tag of a pool. Transitions only move forward."""

    SETUP = "setup"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PrizeShare:
    """Percentage of the total pool paid to one finishing place."""

    place: int
    percentage: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.place, bool) or not isinstance(self.place, int):
            raise TypeError("place must be an integer")
        if self.place < 1:
            raise ValueError("place must be 1 or greater")
        percentage = to_decimal(self.percentage, label="percentage")
        if percentage < 0 or percentage > HUNDRED:
            raise ValueError("percentage must be between 0 and 100")
        object.__setattr__(self, "percentage", percentage)


@dataclass(frozen=True)
class Participant:
    """A person who bought into the pool. Names may repeat."""

    name: str
    has_paid: bool = False


@dataclass(frozen=True)
class Pairing:
    """A participant drawn against a competitor."""

    participant: str
    competitor: str


@dataclass(frozen=True)
class Outcome(Pairing):
    """A pairing that finished in a paying place."""

    place: int
    winnings: Decimal

    def __post_init__(self) -> None:
        if self.place < 1:
            raise ValueError("place must be 1 or greater")
        winnings = to_decimal(self.winnings, label="winnings")
        if winnings < 0:
            raise ValueError("winnings must not be negative")
        object.__setattr__(self, "winnings", winnings)


@dataclass(frozen=True)
class Pool:
    """Authoritative state of one sweepstake.

    Attributes
    ----------
    id : str
        Store key of the pool.
    name : str
        Display name.
    entry_fee : Decimal
        Amount each participant pays in. Must be positive.
    prize_shares : tuple[PrizeShare, ...]
        Prize split ordered by place, starting at place 1.
    competitor_pool : tuple[str, ...]
        Competitor names captured when the pool was created.
    created_at : datetime
        Creation timestamp (UTC). Never changes after creation.
    status : PoolStatus
        Lifecycle tag. It must agree with ``pairings`` and ``outcomes``.
    participants : tuple[Participant, ...]
        Roster, in entry order.
    pairings : tuple[Pairing, ...]
        One pairing per participant, in roster order, once assigned.
    outcomes : tuple[Outcome, ...]
        Paying places in finishing order, once settled.
    """

    id: str
    name: str
    entry_fee: Decimal
    prize_shares: tuple[PrizeShare, ...]
    competitor_pool: tuple[str, ...]
    created_at: datetime
    status: PoolStatus = PoolStatus.SETUP
    participants: tuple[Participant, ...] = field(default_factory=tuple)
    pairings: tuple[Pairing, ...] = field(default_factory=tuple)
    outcomes: tuple[Outcome, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Normalise sequences to tuples so that no caller keeps an alias into
        # the pool's state.
        object.__setattr__(self, "entry_fee", to_decimal(self.entry_fee, label="entry_fee"))
        object.__setattr__(self, "prize_shares", tuple(self.prize_shares))
        object.__setattr__(self, "competitor_pool", tuple(self.competitor_pool))
        object.__setattr__(self, "participants", tuple(self.participants))
        object.__setattr__(self, "pairings", tuple(self.pairings))
        object.__setattr__(self, "outcomes", tuple(self.outcomes))
        object.__setattr__(self, "status", PoolStatus(self.status))
        object.__setattr__(self, "created_at", ensure_utc(self.created_at))

        if self.entry_fee <= 0:
            raise ValueError("entry_fee must be greater than zero")
        for index, share in enumerate(self.prize_shares, start=1):
            if share.place != index:
                raise ValueError("prize shares must be ordered by place starting at 1")
        self._check_status()

    def _check_status(self) -> None:
        if self.status is PoolStatus.SETUP:
            if self.pairings or self.outcomes:
                raise ValueError("a pool in setup cannot have pairings or outcomes")
            return

        roster = [participant.name for participant in self.participants]
        if [pairing.participant for pairing in self.pairings] != roster:
            raise ValueError(
                f"a pool in {self.status.value} must pair every participant exactly once"
            )
        competitors = [pairing.competitor for pairing in self.pairings]
        if len(set(competitors)) != len(competitors):
            raise ValueError("a competitor cannot be paired with two participants")

        if self.status is PoolStatus.ACTIVE:
            if self.outcomes:
                raise ValueError("an active pool cannot have outcomes")
            return

        if len(self.outcomes) > min(len(self.prize_shares), len(self.pairings)):
            raise ValueError("more outcomes than paying places")
        drawn = {(pairing.participant, pairing.competitor) for pairing in self.pairings}
        for index, outcome in enumerate(self.outcomes, start=1):
            if outcome.place != index:
                raise ValueError("outcomes must be ordered by place starting at 1")
            if (outcome.participant, outcome.competitor) not in drawn:
                raise ValueError("outcome does not match any pairing")


DEFAULT_PRIZE_SHARES: tuple[PrizeShare, ...] = (PrizeShare(place=1, percentage=Decimal("60")),)
"""Prize split offered to a new pool: a single first place at 60%."""


def total_pool(pool: Pool) -> Decimal:
    """Return the money collected when every participant pays the entry fee."""
    return pool.entry_fee * len(pool.participants)


def remaining_prize_percentage(pool: Pool) -> Decimal:
    """Return the percentage not yet allocated to a prize place."""
    return HUNDRED - sum((share.percentage for share in pool.prize_shares), Decimal(0))


def paid_participants(pool: Pool) -> list[Participant]:
    return [participant for participant in pool.participants if participant.has_paid]


def unpaid_participants(pool: Pool) -> list[Participant]:
    return [participant for participant in pool.participants if not participant.has_paid]


def collected_amount(pool: Pool) -> Decimal:
    """Return the entry fees actually marked as paid."""
    return pool.entry_fee * len(paid_participants(pool))


def next_prize_share(shares: Sequence[PrizeShare]) -> Optional[PrizeShare]:
    """Return the place a configuration form would append next.

    The new place takes whatever percentage is left over. ``None`` means the
    existing places already allocate the whole pool.
    """

    remaining = HUNDRED - sum((share.percentage for share in shares), Decimal(0))
    if remaining <= 0:
        return None
    return PrizeShare(place=len(shares) + 1, percentage=remaining)


def filter_and_sort(pools: Iterable[Pool], query: str) -> list[Pool]:
    """Return pools whose name or status contains ``query``, newest first.

    Matching is case-insensitive. Pools created at the same instant keep their
    relative input order.
    """

    needle = query.lower()
    matches = [
        pool
        for pool in pools
        if needle in pool.name.lower() or needle in pool.status.value.lower()
    ]
    # ``sorted`` is stable, including with ``reverse=True``.
    return sorted(matches, key=lambda pool: pool.created_at, reverse=True)


def create_pool(
    name: str,
    entry_fee: object,
    prize_shares: Iterable[PrizeShare],
    competitors: Iterable[str],
    *,
    created_at: Optional[datetime] = None,
    pool_id: Optional[str] = None,
) -> Pool:
    """Build a new pool in the ``setup`` state after validating its configuration.

    Parameters
    ----------
    name : str
        Display name. Surrounding whitespace is trimmed.
    entry_fee : int | float | str | Decimal
        Buy-in per participant. Must be positive.
    prize_shares : Iterable[PrizeShare]
        Prize split ordered by place. Percentages must not add up to more
        than 100.
    competitors : Iterable[str]
        Competitor names captured as the pool's fixed field.
    created_at : Optional[datetime], default: None
        Creation time. Defaults to the current UTC time.
    pool_id : Optional[str], default: None
        Explicit identifier. A random ``SWP-`` identifier is generated when
        omitted.

    Returns
    -------
    Pool
        The new pool with an empty roster.

    Raises
    ------
    ValueError
        If the name is blank, the fee is not positive, the prize split
        over-allocates the pool, or the competitors are missing or repeated.
    """

    from .utils import generate_pool_id

    if not isinstance(name, str):
        raise TypeError("name must be a string")
    name = name.strip()
    if not name:
        raise ValueError("name must not be empty")

    shares = tuple(prize_shares)
    allocated = sum((share.percentage for share in shares), Decimal(0))
    if allocated > HUNDRED:
        raise ValueError(f"prize shares allocate {allocated}% of the pool; the limit is 100%")

    field_snapshot = tuple(competitors)
    if not field_snapshot:
        raise ValueError("a pool needs at least one competitor")
    repeated = sorted(
        {competitor for competitor in field_snapshot if field_snapshot.count(competitor) > 1}
    )
    if repeated:
        raise ValueError(f"competitors must be unique; repeated: {', '.join(repeated)}")

    return Pool(
        id=pool_id or generate_pool_id(),
        name=name,
        entry_fee=to_decimal(entry_fee, label="entry_fee"),
        prize_shares=shares,
        competitor_pool=field_snapshot,
        created_at=created_at or datetime.now(timezone.utc),
    )


__all__ = [
    "DEFAULT_PRIZE_SHARES",
    "Outcome",
    "Pairing",
    "Participant",
    "Pool",
    "PoolStatus",
    "PrizeShare",
    "collected_amount",
    "create_pool",
    "filter_and_sort",
    "next_prize_share",
    "paid_participants",
    "remaining_prize_percentage",
    "to_decimal",
    "total_pool",
    "unpaid_participants",
]
