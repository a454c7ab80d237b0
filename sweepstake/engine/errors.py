"""Errors raised by the allocation and settlement engine.

Every error is raised synchronously from pure input checks, so retrying the
same call with the same pool reproduces it.
"""

from __future__ import annotations

from typing import Iterable

from ..models.pool import PoolStatus


class EngineError(ValueError):
    """Base class for rejected engine operations."""


class InvalidStateError(EngineError):
    """Operation attempted from the wrong lifecycle state."""

    def __init__(
        self,
        operation: str,
        actual: PoolStatus,
        expected: Iterable[PoolStatus],
    ) -> None:
        self.operation = operation
        self.actual = actual
        self.expected = tuple(expected)
        allowed = ", ".join(status.value for status in self.expected)
        super().__init__(
            f"Cannot {operation} a pool in '{actual.value}'; expected: {allowed}"
        )


class InsufficientSupplyError(EngineError):
    """Fewer competitors than participants at assignment time."""

    def __init__(self, participants: int, competitors: int) -> None:
        self.participants = participants
        self.competitors = competitors
        super().__init__(
            f"{participants} participants need at least as many competitors; "
            f"only {competitors} supplied"
        )


class EmptyRosterError(EngineError):
    """Assignment attempted on a pool with no participants."""


class NoPairingsError(EngineError):
    """Settlement attempted on a pool with no pairings."""


class ConfigurationWarning(UserWarning):
    """Prize shares allocate more than the whole pool.

    Settlement still pays each place its proportional share; validating the
    split is the caller's job when the pool is configured.
    """


__all__ = [
    "ConfigurationWarning",
    "EmptyRosterError",
    "EngineError",
    "InsufficientSupplyError",
    "InvalidStateError",
    "NoPairingsError",
]
