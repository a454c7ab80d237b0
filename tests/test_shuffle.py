from __future__ import annotations

import random
import unittest
from collections import Counter

from sweepstake.engine import fisher_yates_shuffle


class ScriptedRandom:
    """Stand-in generator returning a fixed sequence from ``randint``."""

    def __init__(self, picks: list[int]):
        self._picks = list(picks)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        value = self._picks.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"scripted pick {value} outside {a}..{b}")
        return value


class FisherYatesTests(unittest.TestCase):
    def test_walks_down_from_last_index(self) -> None:
        rng = ScriptedRandom([3, 2, 1])
        result = fisher_yates_shuffle("abcd", rng)  # type: ignore[arg-type]
        self.assertEqual(result, ["a", "b", "c", "d"])
        self.assertEqual(rng.calls, [(0, 3), (0, 2), (0, 1)])

    def test_swaps_with_picked_index(self) -> None:
        rng = ScriptedRandom([0, 0, 0])
        result = fisher_yates_shuffle(["a", "b", "c", "d"], rng)  # type: ignore[arg-type]
        self.assertEqual(result, ["b", "c", "d", "a"])

    def test_input_is_not_modified(self) -> None:
        items = [1, 2, 3, 4, 5]
        result = fisher_yates_shuffle(items, random.Random(7))
        self.assertEqual(items, [1, 2, 3, 4, 5])
        self.assertEqual(sorted(result), items)
        self.assertIsNot(result, items)

    def test_short_inputs_need_no_draws(self) -> None:
        rng = ScriptedRandom([])
        self.assertEqual(fisher_yates_shuffle([], rng), [])  # type: ignore[arg-type]
        self.assertEqual(fisher_yates_shuffle(["x"], rng), ["x"])  # type: ignore[arg-type]
        self.assertEqual(rng.calls, [])

    def test_seeded_generator_is_reproducible(self) -> None:
        first = fisher_yates_shuffle(range(10), random.Random(42))
        second = fisher_yates_shuffle(range(10), random.Random(42))
        self.assertEqual(first, second)

    def test_every_permutation_is_roughly_equally_likely(self) -> None:
        rng = random.Random(2024)
        trials = 6000
        counts = Counter(tuple(fisher_yates_shuffle("abc", rng)) for _ in range(trials))
        self.assertEqual(len(counts), 6)
        for permutation, count in counts.items():
            # Expected 1000 each; the band is more than six standard deviations wide.
            self.assertTrue(800 <= count <= 1200, f"{permutation}: {count}")


if __name__ == "__main__":
    unittest.main()
