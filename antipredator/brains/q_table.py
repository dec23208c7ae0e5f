"""
Sparse Q-table with lazy zero initialization.
"""
from typing import Dict, Iterator, Tuple

import numpy as np


def q_update(old_q, reward, max_next_q, alpha, gamma):
    """
    One-step Q-learning rule.

    Args:
        old_q: Current estimate Q(s, a)
        reward: Reward observed after taking a in s
        max_next_q: max_a' Q(s', a')
        alpha: Learning rate
        gamma: Discount factor

    Returns:
        float: Updated estimate
    """
    return old_q + alpha * (reward + gamma * max_next_q - old_q)


class QTable:
    """
    Mapping from state key to a vector of action values.

    A key that was never seen reads as all zeros. `get` and `set` store
    the zero vector on first touch; `max_value` and `values` do not.
    """

    def __init__(self, n_actions):
        self.n_actions = n_actions
        self._table: Dict[str, np.ndarray] = {}

    def _row(self, key) -> np.ndarray:
        row = self._table.get(key)
        if row is None:
            row = np.zeros(self.n_actions, dtype=np.float64)
            self._table[key] = row
        return row

    def get(self, key, action) -> float:
        return float(self._row(key)[action])

    def set(self, key, action, value):
        self._row(key)[action] = value

    def values(self, key) -> np.ndarray:
        """Copy of the action values for a key (zeros if unseen)."""
        row = self._table.get(key)
        if row is None:
            return np.zeros(self.n_actions, dtype=np.float64)
        return row.copy()

    def max_value(self, key) -> float:
        row = self._table.get(key)
        if row is None:
            return 0.0
        return float(row.max())

    def learn(self, key, action, reward, next_key, alpha, gamma) -> float:
        """
        Apply the Q-learning update to (key, action).

        The bootstrap target is read before the write.

        Returns:
            float: The stored value
        """
        old_q = self.get(key, action)
        max_next_q = self.max_value(next_key)
        new_q = q_update(old_q, reward, max_next_q, alpha, gamma)
        self.set(key, action, new_q)
        return new_q

    def count_keys(self) -> int:
        return len(self._table)

    def reset(self):
        self._table.clear()

    def is_finite(self) -> bool:
        """Check that every stored value is a finite number."""
        return all(np.isfinite(row).all() for row in self._table.values())

    def items(self) -> Iterator[Tuple[str, np.ndarray]]:
        for key, row in self._table.items():
            yield key, row.copy()

    def __len__(self):
        return len(self._table)

    def __contains__(self, key):
        return key in self._table

    def __repr__(self):
        return f"QTable(states={len(self._table)}, actions={self.n_actions})"
