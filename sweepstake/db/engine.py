"""Engine and session factories for the sweepstake store.

Settings come from the environment, with a ``.env`` file at the repository
root loaded first:

``DB_URL``
    SQLAlchemy URL of the store. Defaults to ``sqlite:///./dev.db``; relative
    SQLite paths resolve against the repository root.
``DB_ECHO``
    ``1``/``true``/``yes`` logs every SQL statement.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .utils import resolve_sqlite_url

# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[2]
load_dotenv(ROOT_DIR / ".env")

DEFAULT_DB_URL = "sqlite:///./dev.db"
TRUTHY = {"1", "true", "yes", "on"}


def configured_url() -> str:
    """Return the store URL from ``DB_URL`` with SQLite paths made absolute."""
    return resolve_sqlite_url(os.getenv("DB_URL", DEFAULT_DB_URL), ROOT_DIR)


def echo_enabled() -> bool:
    return os.getenv("DB_ECHO", "").strip().lower() in TRUTHY


def make_engine(database_url: Optional[str] = None, echo: Optional[bool] = None):
    """Create an engine for ``database_url`` or the configured store.

    ``echo`` falls back to ``DB_ECHO`` when not given.
    """
    return create_engine(
        database_url or configured_url(),
        echo=echo_enabled() if echo is None else echo,
        future=True,
    )


def get_sessionmaker(engine):
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,  # Pools stay readable after the transaction closes
        future=True,
    )
