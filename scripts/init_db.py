"""Create the sweepstake tables on the database named by ``DB_URL``.

Tables are built with ``Base.metadata.create_all``, which only adds missing
tables. There are no migrations: a changed column definition on an existing
database must be applied by hand (or by dropping and re-seeding a dev
database with ``scripts/seed_dev.py``).
"""

from __future__ import annotations

from sqlalchemy import inspect

from sweepstake.db.engine import make_engine
from sweepstake.models import Base


def create_tables() -> None:
    """Create any missing tables on the configured database."""
    engine = make_engine()
    Base.metadata.create_all(engine)


def print_tables() -> None:
    """Inspect the configured database and print all table names."""
    engine = make_engine()
    insp = inspect(engine)
    print("Current tables:", ", ".join(sorted(insp.get_table_names())))


def main() -> None:
    """Create the schema and report the resulting tables."""
    create_tables()
    print_tables()


if __name__ == "__main__":
    main()
