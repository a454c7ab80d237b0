"""Roster edits, returned as new pool snapshots."""

from __future__ import annotations

import dataclasses

from ..models.pool import Participant, Pool, PoolStatus
from .errors import InvalidStateError


def add_participant(pool: Pool, name: str) -> Pool:
    """Return ``pool`` with an unpaid participant called ``name`` appended.

    Only pools in ``setup`` accept new participants, because pairings cover
    the roster exactly once drawn.
    """

    if pool.status is not PoolStatus.SETUP:
        raise InvalidStateError("add a participant to", pool.status, [PoolStatus.SETUP])
    if not isinstance(name, str):
        raise TypeError("participant name must be a string")
    name = name.strip()
    if not name:
        raise ValueError("participant name must not be empty")
    return dataclasses.replace(
        pool, participants=pool.participants + (Participant(name=name),)
    )


def toggle_payment(pool: Pool, index: int) -> Pool:
    """Return ``pool`` with the paid flag of participant ``index`` flipped."""

    if not 0 <= index < len(pool.participants):
        raise IndexError(f"participant index {index} out of range")
    participants = list(pool.participants)
    current = participants[index]
    participants[index] = dataclasses.replace(current, has_paid=not current.has_paid)
    return dataclasses.replace(pool, participants=tuple(participants))


__all__ = ["add_participant", "toggle_payment"]
