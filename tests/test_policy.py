from collections import Counter

import numpy as np

from antipredator.brains.policy import EpsilonGreedyPolicy
from antipredator.brains.q_table import QTable


def _policy(seed=7):
    return EpsilonGreedyPolicy(5, rng=np.random.default_rng(seed))


class TestEpsilonGreedy:

    def test_exploitation_picks_best(self):
        table = QTable(5)
        table.set("s", 3, 1.0)
        policy = _policy()
        assert {policy.choose_action("s", 0.0, table) for _ in range(200)} == {3}

    def test_full_exploration_covers_all_actions(self):
        table = QTable(5)
        table.set("s", 3, 100.0)
        policy = _policy()
        counts = Counter(policy.choose_action("s", 1.0, table) for _ in range(5000))
        assert set(counts) == {0, 1, 2, 3, 4}
        assert all(800 < c < 1200 for c in counts.values())

    def test_ties_are_broken_uniformly(self):
        """All-zero states must not favour the lowest index."""
        table = QTable(5)
        table.get("s", 0)
        policy = _policy()
        counts = Counter(policy.choose_action("s", 0.0, table) for _ in range(5000))
        assert set(counts) == {0, 1, 2, 3, 4}
        assert all(800 < c < 1200 for c in counts.values())

    def test_partial_ties(self):
        table = QTable(5)
        table.set("s", 1, 2.0)
        table.set("s", 3, 2.0)
        table.set("s", 0, -1.0)
        policy = _policy()
        counts = Counter(policy.choose_action("s", 0.0, table) for _ in range(2000))
        assert set(counts) == {1, 3}
        assert 800 < counts[1] < 1200

    def test_unseen_state_is_treated_as_zeros(self):
        table = QTable(5)
        policy = _policy()
        actions = {policy.choose_action("unknown", 0.0, table) for _ in range(500)}
        assert actions == {0, 1, 2, 3, 4}
        assert table.count_keys() == 0

    def test_seeded_policies_agree(self):
        table = QTable(5)
        first, second = _policy(3), _policy(3)
        a = [first.choose_action("s", 0.5, table) for _ in range(100)]
        b = [second.choose_action("s", 0.5, table) for _ in range(100)]
        assert a == b
