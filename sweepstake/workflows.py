import logging
import random
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from .engine import add_participant, assign, settle, toggle_payment
from .models import Horse, Pool, PrizeShare, SweepstakeRecord
from .models.pool import DEFAULT_PRIZE_SHARES, create_pool, filter_and_sort
from .models.utils import generate_pool_id

logger = logging.getLogger(__name__)


def register_horse(session: Session, name: str) -> Horse:
    """Add ``name`` to the competitor registry.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    name : str
        Competitor name. Surrounding whitespace is trimmed.

    Returns
    -------
    Horse
        The persisted registry entry.

    Raises
    ------
    ValueError
        If the name is blank or already registered.
    """

    if not isinstance(name, str):
        raise TypeError("horse name must be a string")
    name = name.strip()
    if not name:
        raise ValueError("horse name must not be empty")
    if Horse.get_by_name(session, name) is not None:
        raise ValueError(f"Horse '{name}' is already registered")

    horse = Horse(name=name)
    session.add(horse)
    session.flush()
    return horse


def remove_horse(session: Session, name: str) -> None:
    """Remove ``name`` from the registry. Existing pools keep their snapshot."""

    name = name.strip()
    horse = Horse.get_by_name(session, name)
    if horse is None:
        raise LookupError(f"Horse '{name}' is not registered")
    session.delete(horse)
    session.flush()


def list_horses(session: Session) -> list[str]:
    return Horse.ordered_names(session)


def create_sweepstake(
    session: Session,
    name: str,
    entry_fee: object,
    prize_shares: Optional[Iterable[PrizeShare]] = None,
    *,
    competitors: Optional[Iterable[str]] = None,
    created_at: Optional[datetime] = None,
) -> Pool:
    """Create and store a new pool in the ``setup`` state.

    The pool captures the competitor field at creation; later edits to the
    registry do not reach it.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session used for persistence.
    name : str
        Display name of the sweepstake.
    entry_fee : int | float | str | Decimal
        Buy-in per participant.
    prize_shares : Optional[Iterable[PrizeShare]], default: None
        Prize split by place. Defaults to :data:`DEFAULT_PRIZE_SHARES`.
    competitors : Optional[Iterable[str]], default: None
        Explicit competitor field. When omitted the registered horses are
        used.
    created_at : Optional[datetime], default: None
        Creation time, defaulting to now (UTC).

    Returns
    -------
    Pool
        The stored pool.

    Raises
    ------
    ValueError
        If the configuration is invalid (see :func:`create_pool`).
    """

    field = list(competitors) if competitors is not None else list_horses(session)
    pool = create_pool(
        name,
        entry_fee,
        DEFAULT_PRIZE_SHARES if prize_shares is None else prize_shares,
        field,
        created_at=created_at,
        pool_id=generate_pool_id(session=session),
    )
    SweepstakeRecord.save(session, pool)
    logger.info(f"Created sweepstake {pool.id} with {len(field)} competitors")
    return pool


def add_participant_to(session: Session, pool_id: str, name: str) -> Pool:
    """Add an unpaid participant to the stored pool ``pool_id``."""

    pool = add_participant(SweepstakeRecord.get(session, pool_id), name)
    SweepstakeRecord.save(session, pool)
    return pool


def toggle_participant_payment(session: Session, pool_id: str, index: int) -> Pool:
    """Flip the paid flag of the participant at ``index``."""

    pool = toggle_payment(SweepstakeRecord.get(session, pool_id), index)
    SweepstakeRecord.save(session, pool)
    return pool


def assign_horses(
    session: Session,
    pool_id: str,
    *,
    rng: Optional[random.Random] = None,
) -> Pool:
    """Draw horses for every participant of ``pool_id`` and store the result.

    The pool's own competitor snapshot is the supply.

    Raises
    ------
    PoolNotFoundError
        If ``pool_id`` is not stored.
    EngineError
        If the pool cannot be assigned (see :func:`sweepstake.engine.assign`).
    """

    pool = SweepstakeRecord.get(session, pool_id)
    assigned = assign(pool, pool.competitor_pool, rng=rng)
    SweepstakeRecord.save(session, assigned)
    logger.info(f"Assigned horses for sweepstake {pool_id}")
    return assigned


def complete_race(
    session: Session,
    pool_id: str,
    *,
    rng: Optional[random.Random] = None,
) -> Pool:
    """Settle ``pool_id`` with a random finishing order and store the result.

    Raises
    ------
    PoolNotFoundError
        If ``pool_id`` is not stored.
    EngineError
        If the pool cannot be settled (see :func:`sweepstake.engine.settle`).
    """

    pool = SweepstakeRecord.get(session, pool_id)
    completed = settle(pool, rng=rng)
    SweepstakeRecord.save(session, completed)
    logger.info(
        f"Completed sweepstake {pool_id} with {len(completed.outcomes)} paying places"
    )
    return completed


def search_sweepstakes(session: Session, query: str = "") -> list[Pool]:
    """Return stored pools matching ``query`` by name or status, newest first."""

    return filter_and_sort(SweepstakeRecord.load_all(session), query)
