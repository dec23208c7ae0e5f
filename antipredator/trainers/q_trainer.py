"""
Tabular Q-learning trainer for the anti-predator fish.
"""
from typing import Dict, Any, Optional

import numpy as np
from loguru import logger

from .base import TrainerBase
from .episode_manager import EpisodeManager
from antipredator.brains.policy import EpsilonGreedyPolicy
from antipredator.brains.q_table import QTable
from antipredator.config.config_manager import ConfigManager, check_steps_per_tick
from antipredator.config.settings import SimulationSettings
from antipredator.errors import ConfigError
from antipredator.simulation.entities import EpisodeState, Fish, Predator
from antipredator.simulation.simulator import Simulator
from antipredator.simulation.snapshot import SimulationSnapshot
from antipredator.simulation.state_encoder import StateEncoder
from antipredator.simulation.world import World


class QLearningTrainer(TrainerBase):
    """
    Owns the arena, the Q-table and the episode lifecycle.

    Each `train_step` runs `steps_per_tick` simulation steps; a caught
    fish is handed to the episode manager before the next step runs.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, rng=None):
        """
        Args:
            config: Configuration dictionary (defaults if omitted)
            rng: numpy Generator; seeded from config if omitted
        """
        manager = ConfigManager()
        if config is None:
            config = manager.create_default_config()
        super().__init__(config)

        self.settings = SimulationSettings.from_config(config, manager)
        self.hyperparams = self.settings.hyperparameters
        self.max_generations = self.settings.max_generations
        self.steps_per_tick = self.settings.display.steps_per_tick
        self.show_sensors = self.settings.display.show_sensors

        self.rng = rng if rng is not None else np.random.default_rng(self.settings.seed)

        arena = self.settings.arena
        self.world = World(arena)
        self.encoder = StateEncoder(arena.width, arena.height, self.settings.encoder)
        self.q_table = QTable(arena.n_actions)
        self.policy = EpsilonGreedyPolicy(arena.n_actions, rng=self.rng)
        self.simulator = Simulator(
            self.world, self.encoder, self.policy,
            self.settings.rewards, self.settings.encoder.close_distance,
        )
        self.episode_manager = EpisodeManager(self.world, self.hyperparams, self.rng)

        self.state = EpisodeState(
            fish=Fish(arena.width / 2, arena.height / 2, arena.fish_radius),
            predator=Predator(arena.corner_margin, arena.corner_margin, arena.predator_radius),
            obstacles=self.world.obstacles,
        )
        self.episode_manager.reset(self.state)

        self.total_steps = 0

    @property
    def stats(self):
        return self.episode_manager.stats

    @property
    def current_generation(self) -> int:
        return self.stats.generation

    def step(self):
        """
        Run a single simulation step and close the episode if the fish was caught.

        Returns:
            StepOutcome
        """
        outcome = self.simulator.step(self.state, self.q_table, self.hyperparams)
        self.total_steps += 1
        if outcome.terminated:
            self.episode_manager.on_episode_end(self.state, outcome.survival_ticks)
        return outcome

    def run_steps(self, n_steps) -> int:
        """
        Run a batch of steps.

        Returns:
            int: Number of episodes that ended during the batch
        """
        episodes = 0
        for _ in range(n_steps):
            if self.step().terminated:
                episodes += 1
        return episodes

    def train_step(self) -> Dict[str, Any]:
        """Execute one tick: `steps_per_tick` simulation steps."""
        self.is_training = True
        episodes = self.run_steps(self.steps_per_tick)
        self.metrics = self.get_metrics()
        self.metrics['episodes_this_tick'] = episodes
        return self.metrics

    def get_metrics(self) -> Dict[str, float]:
        """Get current metrics."""
        return {
            'generation': self.stats.generation,
            'best_time': self.stats.best_time,
            'last_time': self.stats.last_time,
            'avg_time': self.stats.average(),
            'epsilon': self.hyperparams.epsilon,
            'discovered_states': self.q_table.count_keys(),
            'time_alive': self.state.time_alive,
            'total_steps': self.total_steps,
        }

    def get_snapshot(self) -> SimulationSnapshot:
        """Immutable copy of the current state for rendering."""
        arena = self.settings.arena
        return SimulationSnapshot(
            fish=self.state.fish.position,
            predator=self.state.predator.position,
            obstacles=self.state.obstacles,
            time_alive=self.state.time_alive,
            game_over=self.state.game_over,
            epsilon=self.hyperparams.epsilon,
            discovered_states=self.q_table.count_keys(),
            generation=self.stats.generation,
            best_time=self.stats.best_time,
            last_time=self.stats.last_time,
            arena_size=(arena.width, arena.height),
            fish_radius=arena.fish_radius,
            predator_radius=arena.predator_radius,
            steps_per_tick=self.steps_per_tick,
            show_sensors=self.show_sensors,
            score_history=tuple(self.stats.score_history),
        )

    def reset(self):
        """Discard all learning: Q-table, statistics and exploration rate."""
        self.episode_manager.reset_all(self.q_table, self.state)
        self.total_steps = 0
        self.metrics = {}

    def set_speed(self, steps_per_tick):
        """
        Set how many simulation steps run per tick.

        Raises:
            ConfigError: If outside [1, 50]
        """
        check_steps_per_tick(steps_per_tick)
        self.steps_per_tick = steps_per_tick
        logger.info("Speed set to {} steps per tick", steps_per_tick)

    def set_epsilon(self, epsilon):
        if not 0.0 <= epsilon <= 1.0:
            raise ConfigError(f"epsilon must be in [0, 1], got {epsilon!r}")
        self.hyperparams.epsilon = float(epsilon)

    def set_show_sensors(self, enabled: bool):
        self.show_sensors = bool(enabled)

    def demo_mode(self):
        """Pure exploitation at normal speed, to watch what was learned."""
        self.set_epsilon(0.0)
        self.set_speed(1)
        logger.info("Demo mode: exploiting {} learned states", self.q_table.count_keys())
