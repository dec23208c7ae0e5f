"""
Episode lifecycle: resets, exploration decay and survival statistics.
"""
from dataclasses import dataclass, field
from typing import List

import numpy as np
from loguru import logger


@dataclass
class RunStatistics:
    """Survival statistics across episodes."""

    generation: int = 0
    best_time: int = 0
    last_time: int = 0
    score_history: List[int] = field(default_factory=list)

    def record(self, survival_ticks):
        self.score_history.append(survival_ticks)
        if survival_ticks > self.best_time:
            self.best_time = survival_ticks
        self.last_time = survival_ticks
        self.generation += 1

    def average(self, window=10) -> float:
        """Mean survival time over the most recent episodes."""
        if not self.score_history:
            return 0.0
        return float(np.mean(self.score_history[-window:]))

    def reset(self):
        self.generation = 0
        self.best_time = 0
        self.last_time = 0
        self.score_history = []


class EpisodeManager:
    """
    Resets the arena between episodes and keeps the run statistics.
    """

    def __init__(self, world, hyperparams, rng):
        """
        Args:
            world: World used to place the fish and the predator
            hyperparams: Hyperparameters whose epsilon decays per episode
            rng: numpy Generator for spawn positions
        """
        self.world = world
        self.hyperparams = hyperparams
        self.rng = rng
        self.stats = RunStatistics()

    def reset(self, state):
        """
        Start a fresh episode: fish near the centre, predator in a corner.

        Args:
            state: EpisodeState to reset in place
        """
        self.world.spawn_fish(state.fish, self.rng)
        self.world.spawn_predator(state.predator, self.rng)
        state.time_alive = 0
        state.game_over = False

    def on_episode_end(self, state, survival_ticks):
        """
        Record a finished episode, decay exploration and reset.

        Args:
            state: EpisodeState that just terminated
            survival_ticks: Ticks the fish survived
        """
        self.stats.record(survival_ticks)
        epsilon = self.hyperparams.decay_epsilon()

        logger.debug(
            "Generation {} survived {} ticks (best {}, epsilon {:.3f})",
            self.stats.generation, survival_ticks, self.stats.best_time, epsilon,
        )

        self.reset(state)

    def reset_all(self, q_table, state):
        """
        Forget all learning and statistics.

        Args:
            q_table: QTable to clear
            state: EpisodeState to reset
        """
        q_table.reset()
        self.hyperparams.reset_exploration()
        self.stats.reset()
        self.reset(state)
        logger.info("Brain reset: Q-table cleared, epsilon back to {}", self.hyperparams.epsilon)
