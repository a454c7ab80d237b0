import dataclasses
import json
import random
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from unittest.mock import patch

from sweepstake.engine import assign, settle
from sweepstake.models import (
    Base,
    Horse,
    Participant,
    PoolNotFoundError,
    PoolStatus,
    PrizeShare,
    SweepstakeRecord,
    create_pool,
)
from sweepstake.models.utils import generate_pool_id

CREATED = datetime(2025, 11, 4, 4, 0, tzinfo=timezone.utc)


class DBTestCase(unittest.TestCase):
    def setUp(self):
        # In-memory SQLite for isolation
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )

    def tearDown(self):
        self.engine.dispose()


class SweepstakeRecordTests(DBTestCase):
    def _completed_pool(self):
        pool = create_pool(
            "Office Cup",
            "12.345",
            [PrizeShare(place=1, percentage="62.5"), PrizeShare(place=2, percentage="37.5")],
            ["Vauban", "Gold Trip", "Breakup"],
            created_at=CREATED,
            pool_id="SWP-roundtrip",
        )
        pool = dataclasses.replace(
            pool,
            participants=(Participant("Alice", has_paid=True), Participant("Bob")),
        )
        return settle(assign(pool, pool.competitor_pool, rng=random.Random(3)), rng=random.Random(3))

    def test_round_trip_is_lossless(self):
        pool = self._completed_pool()
        with self.Session.begin() as session:
            SweepstakeRecord.save(session, pool)

        with self.Session() as session:
            loaded = SweepstakeRecord.get(session, pool.id)

        self.assertEqual(loaded, pool)
        self.assertEqual(loaded.entry_fee, Decimal("12.345"))
        self.assertEqual(loaded.created_at, CREATED)
        self.assertIs(loaded.status, PoolStatus.COMPLETED)
        self.assertEqual(
            [outcome.winnings for outcome in loaded.outcomes],
            [outcome.winnings for outcome in pool.outcomes],
        )

    def test_save_overwrites_latest_snapshot(self):
        pool = create_pool(
            "Cup", 5, [PrizeShare(place=1, percentage=100)], ["A", "B"],
            created_at=CREATED, pool_id="SWP-1",
        )
        with self.Session.begin() as session:
            SweepstakeRecord.save(session, pool)
            updated = dataclasses.replace(pool, participants=(Participant("Alice"),))
            active = assign(updated, updated.competitor_pool, rng=random.Random(1))
            SweepstakeRecord.save(session, active)

        with self.Session() as session:
            stored = session.get(SweepstakeRecord, "SWP-1")
            self.assertEqual(stored.status, "active")
            self.assertEqual(len(stored.pairings), 1)
            self.assertEqual(SweepstakeRecord.get(session, "SWP-1"), active)
            self.assertEqual(len(SweepstakeRecord.load_all(session)), 1)

    def test_missing_pool(self):
        with self.Session() as session:
            with self.assertRaises(PoolNotFoundError) as ctx:
                SweepstakeRecord.get(session, "SWP-missing")
            self.assertEqual(ctx.exception.pool_id, "SWP-missing")
            self.assertIsInstance(ctx.exception, LookupError)
            self.assertIsNone(SweepstakeRecord.find(session, "SWP-missing"))

    def test_load_all_oldest_first(self):
        with self.Session.begin() as session:
            for offset, pool_id in [(2, "SWP-c"), (0, "SWP-a"), (1, "SWP-b")]:
                SweepstakeRecord.save(
                    session,
                    create_pool(
                        pool_id, 1, [], ["A"],
                        created_at=CREATED + timedelta(hours=offset), pool_id=pool_id,
                    ),
                )
        with self.Session() as session:
            ids = [pool.id for pool in SweepstakeRecord.load_all(session)]
        self.assertEqual(ids, ["SWP-a", "SWP-b", "SWP-c"])

    def test_status_check_constraint(self):
        with self.assertRaises(IntegrityError):
            with self.Session.begin() as session:
                record = SweepstakeRecord.from_pool(
                    create_pool("Cup", 1, [], ["A"], pool_id="SWP-bad")
                )
                record.status = "cancelled"
                session.add(record)

    def test_to_json(self):
        pool = self._completed_pool()
        with self.Session.begin() as session:
            record = SweepstakeRecord.save(session, pool)
            payload = record.to_json()
            self.assertEqual(payload["id"], "SWP-roundtrip")
            self.assertEqual(payload["entry_fee"], "12.345")
            self.assertEqual(payload["status"], "completed")
            self.assertEqual(payload["created_at"], CREATED.isoformat())
            self.assertEqual(
                payload["prize_shares"],
                [{"place": 1, "percentage": "62.5"}, {"place": 2, "percentage": "37.5"}],
            )
            self.assertEqual(
                payload["participants"],
                [{"name": "Alice", "has_paid": True}, {"name": "Bob", "has_paid": False}],
            )
            self.assertEqual(len(payload["outcomes"]), 2)
            self.assertEqual(json.loads(record.to_json_str()), payload)


class HorseRegistryModelTests(DBTestCase):
    def test_names_in_registration_order(self):
        with self.Session.begin() as session:
            session.add_all([Horse(name="Vauban"), Horse(name="Absurde"), Horse(name="Breakup")])
        with self.Session() as session:
            self.assertEqual(Horse.ordered_names(session), ["Vauban", "Absurde", "Breakup"])
            self.assertIsNotNone(Horse.get_by_name(session, "Absurde"))
            self.assertIsNone(Horse.get_by_name(session, "absurde"))

    def test_names_are_unique(self):
        with self.assertRaises(IntegrityError):
            with self.Session.begin() as session:
                session.add_all([Horse(name="Vauban"), Horse(name="Vauban")])


class GeneratePoolIdTests(DBTestCase):
    def test_shape(self):
        pool_id = generate_pool_id()
        prefix, suffix = pool_id.split("-")
        self.assertEqual(prefix, "SWP")
        self.assertEqual(len(suffix), 12)
        self.assertTrue(suffix.isalnum())

    def test_exhausted_attempts_raise(self):
        with self.Session.begin() as session:
            SweepstakeRecord.save(
                session, create_pool("Cup", 1, [], ["A"], pool_id="X-0")
            )
            # A one-character alphabet slot with a taken id cannot yield anything new.
            with patch(
                "sweepstake.models.utils.secrets.choice", return_value="0"
            ):
                with self.assertRaises(RuntimeError):
                    generate_pool_id("X", session=session, length=1, max_attempts=3)


if __name__ == "__main__":
    unittest.main()
