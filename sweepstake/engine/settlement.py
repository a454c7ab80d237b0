"""Random finishing order and payout computation."""

from __future__ import annotations

import dataclasses
import logging
import random
import warnings
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional

from ..models.pool import HUNDRED, Outcome, Pool, PoolStatus, total_pool
from .errors import ConfigurationWarning, InvalidStateError, NoPairingsError
from .shuffle import fisher_yates_shuffle

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _digits(value: Decimal) -> int:
    return len(value.as_tuple().digits)


def round2(amount: Decimal) -> Decimal:
    """Round to cents, halves away from zero, at any magnitude."""
    with localcontext() as ctx:
        # quantize needs room for every digit left of the cents.
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def place_winnings(pool_total: Decimal, percentage: Decimal) -> Decimal:
    """Return the rounded payout for a place taking ``percentage`` of ``pool_total``."""
    with localcontext() as ctx:
        # The product of two decimals is exact with the sum of their digits.
        ctx.prec = max(ctx.prec, _digits(pool_total) + _digits(percentage) + 3)
        share = pool_total * percentage / HUNDRED
    return round2(share)


def settle(pool: Pool, *, rng: Optional[random.Random] = None) -> Pool:
    """Draw a finishing order and pay out the prize places.

    The pairings are shuffled with :func:`fisher_yates_shuffle`; the first
    ``min(len(prize_shares), len(pairings))`` of them finish in places 1, 2,
    and so on. Each place is paid its percentage of :func:`total_pool`,
    rounded to cents. The rounded payouts are not adjusted to add up to the
    exact pool total.

    Parameters
    ----------
    pool : Pool
        Pool in the ``active`` state.
    rng : random.Random, optional
        Random source used for the shuffle.

    Returns
    -------
    Pool
        A new ``completed`` pool with its outcomes.

    Raises
    ------
    InvalidStateError
        If ``pool`` is not ``active``.
    NoPairingsError
        If ``pool`` has no pairings.

    Warns
    -----
    ConfigurationWarning
        If the prize shares add up to more than 100%. The payouts are still
        computed as configured.
    """

    if pool.status is not PoolStatus.ACTIVE:
        raise InvalidStateError("settle", pool.status, [PoolStatus.ACTIVE])
    if not pool.pairings:
        raise NoPairingsError(f"Pool {pool.id} has no pairings to settle")

    allocated = sum((share.percentage for share in pool.prize_shares), Decimal(0))
    if allocated > HUNDRED:
        message = (
            f"Prize shares of pool {pool.id} allocate {allocated}% of the pool; "
            "payouts will exceed the money collected"
        )
        logger.warning(message)
        warnings.warn(message, ConfigurationWarning, stacklevel=2)

    places = min(len(pool.prize_shares), len(pool.pairings))
    finishing_order = fisher_yates_shuffle(pool.pairings, rng)[:places]
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _digits(pool.entry_fee) + len(str(len(pool.participants))))
        pool_total = total_pool(pool)
    outcomes = tuple(
        Outcome(
            participant=pairing.participant,
            competitor=pairing.competitor,
            place=share.place,
            winnings=place_winnings(pool_total, share.percentage),
        )
        for pairing, share in zip(finishing_order, pool.prize_shares)
    )
    logger.debug(
        f"Settled pool {pool.id}: {len(outcomes)} paying places from {pool_total}"
    )
    return dataclasses.replace(pool, outcomes=outcomes, status=PoolStatus.COMPLETED)


__all__ = ["place_winnings", "round2", "settle"]
