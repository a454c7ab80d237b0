"""Column types shared by the ORM models."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class DecimalText(TypeDecorator):
    """Store a :class:`~decimal.Decimal` as its exact string form.

    SQLite has no native decimal type, so ``Numeric`` would round-trip money
    through a float. Text keeps every digit the caller supplied.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, float):
            value = str(value)
        return str(Decimal(value))

    def process_result_value(self, value, dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)
