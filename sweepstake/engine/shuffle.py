"""Uniform random permutations."""

from __future__ import annotations

import random
from typing import Iterable, Optional, TypeVar

T = TypeVar("T")


def fisher_yates_shuffle(items: Iterable[T], rng: Optional[random.Random] = None) -> list[T]:
    """Return a uniformly random permutation of ``items``.

    Walks from the last index down to 1, swapping each position with one
    drawn uniformly from ``0..i`` inclusive. The input is never modified.

    Parameters
    ----------
    items : Iterable[T]
        Values to permute.
    rng : random.Random, optional
        Source of uniform integers; only ``randint`` is used. Pass a seeded
        generator for reproducible draws. If not provided, a new
        non-deterministic generator is used.

    Returns
    -------
    list[T]
        A new list holding the permuted values.
    """

    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


__all__ = ["fisher_yates_shuffle"]
