"""Utility helpers for the models package."""

from __future__ import annotations

import secrets
import string
from typing import Optional
from sqlalchemy.orm import Session

BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase


def generate_pool_id(
    prefix: str = "SWP",
    session: Optional[Session] = None,
    length: int = 12,
    max_attempts: int = 32,
) -> str:
    """Return a pool identifier made of ``prefix`` and base62 random characters.

    When a session is provided, the helper retries if the generated value is
    already stored (or pending) as a ``SweepstakeRecord`` id.
    """

    attempts = 0
    while attempts < max_attempts:
        suffix = "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))
        candidate = f"{prefix}-{suffix}"[:64]

        if session is not None:
            from .record import SweepstakeRecord

            pending = any(
                isinstance(obj, SweepstakeRecord) and obj.id == candidate
                for obj in session.new
            )
            if pending or session.get(SweepstakeRecord, candidate) is not None:
                attempts += 1
                continue

        return candidate

    raise RuntimeError("Unable to generate a unique pool identifier after multiple attempts")
