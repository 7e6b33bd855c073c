from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from traineer.entropy_engine import EntropyEngine
from traineer.policies import (
    PermissionPolicy,
    decide_permission,
    literal_candidates,
    nearest_candidates,
    resolve_reward_policy,
    smallest_deviation,
)
from traineer.records import Permission, Reward


class _FixedRandom:
    def __init__(self, draw: float = 0.0, index: int = 0) -> None:
        self.draw = draw
        self.index = index
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return self.draw

    def randrange(self, stop: int) -> int:
        return self.index


class PermissionPolicyTest(unittest.TestCase):
    def setUp(self) -> None:
        self.permission = Permission(id="snack", min_mood=0.0, certain_mood=10.0)

    def test_below_min_is_denied(self) -> None:
        source = _FixedRandom(draw=0.0)
        for policy in PermissionPolicy:
            self.assertFalse(decide_permission(-5.0, self.permission, EntropyEngine(source), policy))
        self.assertEqual(source.draws, 0)

    def test_at_certain_is_granted_without_draw(self) -> None:
        source = _FixedRandom(draw=0.99)
        for policy in PermissionPolicy:
            self.assertTrue(decide_permission(10.0, self.permission, EntropyEngine(source), policy))
        self.assertEqual(source.draws, 0)

    def test_literal_falls_through_to_grant(self) -> None:
        source = _FixedRandom(draw=0.9)
        entropy = EntropyEngine(source)
        self.assertTrue(decide_permission(5.0, self.permission, entropy, PermissionPolicy.LITERAL))
        self.assertEqual(source.draws, 1)

    def test_strict_denies_failed_draw(self) -> None:
        entropy = EntropyEngine(_FixedRandom(draw=0.9))
        self.assertFalse(decide_permission(5.0, self.permission, entropy, PermissionPolicy.STRICT))
        entropy = EntropyEngine(_FixedRandom(draw=0.5))
        self.assertTrue(decide_permission(5.0, self.permission, entropy, PermissionPolicy.STRICT))

    def test_parse_falls_back_to_literal(self) -> None:
        self.assertIs(PermissionPolicy.parse("STRICT"), PermissionPolicy.STRICT)
        self.assertIs(PermissionPolicy.parse("whatever"), PermissionPolicy.LITERAL)


class RewardCandidatePolicyTest(unittest.TestCase):
    def setUp(self) -> None:
        self.rewards = [
            Reward(id="praise", value=1.0),
            Reward(id="break", value=3.0),
            Reward(id="treat", value=8.0),
        ]

    def test_smallest_deviation_is_signed(self) -> None:
        self.assertEqual(smallest_deviation(self.rewards, 2.0, 200.0), -1.0)
        self.assertEqual(smallest_deviation(self.rewards, 0.0, 200.0), 1.0)

    def test_search_bound_caps_deviation(self) -> None:
        self.assertEqual(smallest_deviation(self.rewards, 50.0, 10.0), 10.0)

    def test_literal_compares_value_to_deviation(self) -> None:
        self.assertEqual([r.id for r in literal_candidates(self.rewards, 1.0, 0.0)], ["praise"])
        self.assertEqual(literal_candidates(self.rewards, -1.0, 2.0), [])

    def test_nearest_compares_deviation(self) -> None:
        self.assertEqual([r.id for r in nearest_candidates(self.rewards, -1.0, 2.0)], ["praise"])
        self.assertEqual([r.id for r in nearest_candidates(self.rewards, 1.0, 7.0)], ["treat"])

    def test_resolve_by_name(self) -> None:
        self.assertIs(resolve_reward_policy("nearest"), nearest_candidates)
        self.assertIs(resolve_reward_policy("unknown"), literal_candidates)


class EntropyEngineTest(unittest.TestCase):
    def test_pick_index_rejects_empty(self) -> None:
        with self.assertRaises(ValueError):
            EntropyEngine().pick_index(0)

    def test_unseeded_draws_stay_in_range(self) -> None:
        engine = EntropyEngine()
        for _ in range(50):
            value = engine.draw_unit()
            self.assertGreaterEqual(value, 0.0)
            self.assertLess(value, 1.0)
            self.assertIn(engine.pick_index(3), (0, 1, 2))


if __name__ == "__main__":
    unittest.main()
