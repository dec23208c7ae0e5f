# fish_env.py
# Gymnasium wrapper around the anti-predator arena

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from antipredator.config.config_manager import ConfigManager
from antipredator.config.settings import SimulationSettings
from antipredator.simulation.entities import EpisodeState, Fish, Predator
from antipredator.simulation.simulator import Simulator
from antipredator.simulation.state_encoder import N_OCTANTS, DISTANCE_TIERS, StateEncoder
from antipredator.simulation.world import World
from antipredator.trainers.episode_manager import EpisodeManager


class FishEvasionEnv(gym.Env):
    """
    Gymnasium environment for the fish-vs-predator arena.

    Observation Space:
        - MultiDiscrete([8, 3, 2, 2, 2, 2, 2]): threat octant, distance tier
          (CRITICAL/CLOSE/FAR), wall bits N/S/W/E, hiding bit

    Action Space:
        - Discrete(5): Stay, Up, Down, Left, Right

    Reward Structure:
        - Survival: +1 per tick
        - Hiding bonus: +0.5 inside an obstacle while the predator is close
        - Capture: -100 (replaces the above)

    Episode Termination:
        - Predator catches the fish
        - Maximum steps reached (truncation)
    """

    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 60
    }

    def __init__(self, config=None, max_steps: int = 5000, render_mode: str | None = None):
        """
        Initialize environment

        Args:
            config: Configuration dictionary (defaults if omitted)
            max_steps: Maximum steps per episode
            render_mode: 'ansi' for a text frame
        """
        super().__init__()

        if config is None:
            config = ConfigManager().create_default_config()
        self.settings = SimulationSettings.from_config(config)
        self.max_steps = max_steps
        self.render_mode = render_mode
        self.rng = np.random.default_rng(self.settings.seed)

        arena = self.settings.arena
        self.world = World(arena)
        self.encoder = StateEncoder(arena.width, arena.height, self.settings.encoder)
        self.simulator = Simulator(
            self.world, self.encoder, None,
            self.settings.rewards, self.settings.encoder.close_distance,
        )
        self.episode_manager = EpisodeManager(self.world, self.settings.hyperparameters, self.rng)
        self.state = EpisodeState(
            fish=Fish(arena.width / 2, arena.height / 2, arena.fish_radius),
            predator=Predator(arena.corner_margin, arena.corner_margin, arena.predator_radius),
            obstacles=self.world.obstacles,
        )

        self.observation_space = spaces.MultiDiscrete(
            [N_OCTANTS, len(DISTANCE_TIERS), 2, 2, 2, 2, 2]
        )
        self.action_space = spaces.Discrete(arena.n_actions)

    def _get_obs(self):
        f = self.encoder.features(self.state.fish.position, self.state.predator.position,
                                  self.state.obstacles)
        return np.array([
            f.octant, self.encoder.tier_index(f.tier),
            int(f.wall_north), int(f.wall_south), int(f.wall_west), int(f.wall_east),
            int(f.hiding),
        ], dtype=np.int64)

    def _get_info(self):
        return {
            "time_alive": self.state.time_alive,
            "state_key": self.simulator.encode(self.state),
            "fish": self.state.fish.position,
            "predator": self.state.predator.position,
        }

    def reset(self, *, seed: int | None = None, options: dict | None = None):
        """
        Reset environment to initial state

        Returns:
            observation: Initial observation
            info: Additional information dictionary
        """
        super().reset(seed=seed)
        if seed is not None:
            self.rng = np.random.default_rng(seed)
            self.episode_manager.rng = self.rng

        self.episode_manager.reset(self.state)
        return self._get_obs(), self._get_info()

    def step(self, action):
        """
        Execute one tick

        Args:
            action: Action index [0-4]

        Returns:
            observation, reward, terminated, truncated, info
        """
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action!r}")

        reward, terminated = self.simulator.advance(self.state, int(action))
        truncated = not terminated and self.state.time_alive >= self.max_steps

        return self._get_obs(), float(reward), terminated, truncated, self._get_info()

    def render(self):
        if self.render_mode != "ansi":
            return None
        fish, pred = self.state.fish, self.state.predator
        return (f"t={self.state.time_alive} fish=({fish.x:.1f},{fish.y:.1f}) "
                f"predator=({pred.x:.1f},{pred.y:.1f}) key={self.simulator.encode(self.state)}")
