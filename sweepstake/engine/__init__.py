"""Allocation and settlement engine for sweepstake pools."""

from .allocation import assign
from .errors import (
    ConfigurationWarning,
    EmptyRosterError,
    EngineError,
    InsufficientSupplyError,
    InvalidStateError,
    NoPairingsError,
)
from .roster import add_participant, toggle_payment
from .settlement import place_winnings, round2, settle
from .shuffle import fisher_yates_shuffle

__all__ = [
    "ConfigurationWarning",
    "EmptyRosterError",
    "EngineError",
    "InsufficientSupplyError",
    "InvalidStateError",
    "NoPairingsError",
    "add_participant",
    "assign",
    "fisher_yates_shuffle",
    "place_winnings",
    "round2",
    "settle",
    "toggle_payment",
]
