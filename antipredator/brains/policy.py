"""
Epsilon-greedy action selection over a Q-table.
"""
import numpy as np


class EpsilonGreedyPolicy:
    """
    Explores with probability epsilon, otherwise exploits the best known
    action. Ties are broken uniformly at random so that equally valued
    actions (e.g. a fresh all-zero state) all get tried.
    """

    def __init__(self, n_actions, rng=None):
        """
        Args:
            n_actions: Number of discrete actions
            rng: numpy Generator (a fresh unseeded one if omitted)
        """
        self.n_actions = n_actions
        self.rng = rng if rng is not None else np.random.default_rng()

    def choose_action(self, key, epsilon, q_table) -> int:
        """
        Pick an action for a state.

        Args:
            key: State key
            epsilon: Exploration probability
            q_table: QTable to exploit

        Returns:
            int: Action index
        """
        if self.rng.random() < epsilon:
            return int(self.rng.integers(self.n_actions))
        return self.greedy_action(key, q_table)

    def greedy_action(self, key, q_table) -> int:
        values = q_table.values(key)
        # Exact equality: ties among identical values are expected
        best_actions = np.flatnonzero(values == values.max())
        if best_actions.size == 0:
            best_actions = np.arange(self.n_actions)
        return int(self.rng.choice(best_actions))
