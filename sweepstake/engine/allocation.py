"""Random pairing of participants to competitors."""

from __future__ import annotations

import dataclasses
import logging
import random
from typing import Iterable, Optional

from ..models.pool import Pairing, Pool, PoolStatus
from .errors import EmptyRosterError, InsufficientSupplyError, InvalidStateError
from .shuffle import fisher_yates_shuffle

logger = logging.getLogger(__name__)


def assign(
    pool: Pool,
    competitor_supply: Iterable[str],
    *,
    rng: Optional[random.Random] = None,
) -> Pool:
    """Draw one distinct competitor for every participant.

    The supply is shuffled with :func:`fisher_yates_shuffle` and participant
    ``i`` receives shuffled competitor ``i``, so every ordered selection of
    competitors is equally likely and none is handed out twice.

    Parameters
    ----------
    pool : Pool
        Pool in the ``setup`` state.
    competitor_supply : Iterable[str]
        Competitor names to draw from. Callers pass de-duplicated names,
        normally ``pool.competitor_pool``.
    rng : random.Random, optional
        Random source used for the shuffle.

    Returns
    -------
    Pool
        A new ``active`` pool with one pairing per participant.

    Raises
    ------
    InvalidStateError
        If ``pool`` is not in ``setup``.
    EmptyRosterError
        If ``pool`` has no participants.
    InsufficientSupplyError
        If the supply holds fewer names than there are participants.
    """

    if pool.status is not PoolStatus.SETUP:
        raise InvalidStateError("assign", pool.status, [PoolStatus.SETUP])
    if not pool.participants:
        raise EmptyRosterError(f"Pool {pool.id} has no participants to assign")

    supply = tuple(competitor_supply)
    if len(supply) < len(pool.participants):
        raise InsufficientSupplyError(len(pool.participants), len(supply))

    drawn = fisher_yates_shuffle(supply, rng)[: len(pool.participants)]
    pairings = tuple(
        Pairing(participant=participant.name, competitor=competitor)
        for participant, competitor in zip(pool.participants, drawn)
    )
    logger.debug(
        f"Assigned {len(pairings)} of {len(supply)} competitors for pool {pool.id}"
    )
    return dataclasses.replace(pool, pairings=pairings, status=PoolStatus.ACTIVE)


__all__ = ["assign"]
