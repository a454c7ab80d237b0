from .base import Base

# import models so autoloaders can discover mappers
from .horse import Horse  # noqa: F401
from .record import PoolNotFoundError, SweepstakeRecord  # noqa: F401
from .pool import (  # noqa: F401
    DEFAULT_PRIZE_SHARES,
    Outcome,
    Pairing,
    Participant,
    Pool,
    PoolStatus,
    PrizeShare,
    collected_amount,
    create_pool,
    filter_and_sort,
    next_prize_share,
    paid_participants,
    remaining_prize_percentage,
    total_pool,
    unpaid_participants,
)

__all__ = [
    "Base",
    "Horse",
    "PoolNotFoundError",
    "SweepstakeRecord",
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
    "total_pool",
    "unpaid_participants",
]
