"""
Typed settings built from a validated configuration dictionary.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from antipredator.errors import ConfigError
from antipredator.simulation.entities import Obstacle
from .config_manager import ConfigManager, MIN_STEPS_PER_TICK, MAX_STEPS_PER_TICK

__all__ = [
    "ArenaConfig", "EncoderConfig", "RewardConfig", "DisplayConfig",
    "Hyperparameters", "SimulationSettings",
    "MIN_STEPS_PER_TICK", "MAX_STEPS_PER_TICK",
]


# ------------------------------------------------------------
# ARENA / PHYSICS
# ------------------------------------------------------------
@dataclass(frozen=True)
class ArenaConfig:
    width: float = 600.0
    height: float = 400.0
    fish_radius: float = 12.0
    predator_radius: float = 20.0
    fish_speed: float = 3.5
    predator_speed: float = 2.0
    predator_obstacle_slowdown: float = 0.5
    spawn_jitter: float = 50.0     # +/- around the centre
    corner_margin: float = 20.0    # predator spawn inset
    action_vectors: Tuple[Tuple[float, float], ...] = (
        (0.0, 0.0), (0.0, -1.0), (0.0, 1.0), (-1.0, 0.0), (1.0, 0.0),
    )
    obstacles: Tuple[Obstacle, ...] = ()

    @property
    def capture_distance(self) -> float:
        return self.fish_radius + self.predator_radius

    @property
    def n_actions(self) -> int:
        return len(self.action_vectors)


# ------------------------------------------------------------
# STATE DISCRETIZATION
# ------------------------------------------------------------
@dataclass(frozen=True)
class EncoderConfig:
    critical_distance: float = 60.0
    close_distance: float = 150.0
    wall_margin: float = 40.0


# ------------------------------------------------------------
# REWARDS
# ------------------------------------------------------------
@dataclass(frozen=True)
class RewardConfig:
    survival: float = 1.0
    hiding_bonus: float = 0.5
    capture: float = -100.0


# ------------------------------------------------------------
# HOST / RENDERING KNOBS
# ------------------------------------------------------------
@dataclass(frozen=True)
class DisplayConfig:
    steps_per_tick: int = 1
    show_sensors: bool = True
    fps: float = 60.0


@dataclass(frozen=False)  # epsilon decays during the run
class Hyperparameters:
    """
    Q-learning tunables.

    `epsilon` is the live exploration rate; `epsilon_start` is what a
    full reset restores.
    """

    alpha: float = 0.1
    gamma: float = 0.9
    epsilon_start: float = 1.0
    epsilon_decay: float = 0.995
    epsilon_min: float = 0.01
    epsilon: Optional[float] = None

    def __post_init__(self):
        if self.epsilon is None:
            self.epsilon = self.epsilon_start

    def decay_epsilon(self) -> float:
        """Apply one episode of exploration decay, never going below the floor."""
        self.epsilon = max(self.epsilon_min, self.epsilon * self.epsilon_decay)
        return self.epsilon

    def reset_exploration(self):
        self.epsilon = self.epsilon_start


@dataclass(frozen=True)
class SimulationSettings:
    arena: ArenaConfig
    encoder: EncoderConfig
    rewards: RewardConfig
    display: DisplayConfig
    hyperparameters: Hyperparameters
    max_generations: Optional[int] = None
    seed: Optional[int] = None

    @classmethod
    def from_config(cls, config, manager: Optional[ConfigManager] = None) -> "SimulationSettings":
        """
        Build typed settings from a configuration dictionary.

        Args:
            config: Nested configuration dictionary
            manager: ConfigManager used for validation

        Returns:
            SimulationSettings

        Raises:
            ConfigError: If the configuration does not validate
        """
        manager = manager or ConfigManager()
        errors = manager.validate(config)
        if errors:
            raise ConfigError(errors)

        sim = config['simulation']
        arena = ArenaConfig(
            width=float(sim['arena_width']),
            height=float(sim['arena_height']),
            fish_radius=float(sim['fish_radius']),
            predator_radius=float(sim['predator_radius']),
            fish_speed=float(sim['fish_speed']),
            predator_speed=float(sim['predator_speed']),
            predator_obstacle_slowdown=float(sim.get('predator_obstacle_slowdown', 0.5)),
            spawn_jitter=float(sim.get('spawn_jitter', 50)),
            corner_margin=float(sim.get('corner_margin', 20)),
            action_vectors=tuple((float(a['dx']), float(a['dy'])) for a in sim['actions']),
            obstacles=tuple(Obstacle.from_dict(o) for o in sim.get('obstacles', [])),
        )

        state = config['state']
        encoder = EncoderConfig(
            critical_distance=float(state['critical_distance']),
            close_distance=float(state['close_distance']),
            wall_margin=float(state['wall_margin']),
        )

        rew = config['rewards']
        rewards = RewardConfig(
            survival=float(rew['survival']),
            hiding_bonus=float(rew['hiding_bonus']),
            capture=float(rew['capture']),
        )

        vis = config['visualization']
        display = DisplayConfig(
            steps_per_tick=int(vis['steps_per_tick']),
            show_sensors=bool(vis.get('show_sensors', True)),
            fps=float(vis.get('fps', 60)),
        )

        ql = config['qlearning']
        hyper = Hyperparameters(
            alpha=float(ql['alpha']),
            gamma=float(ql['gamma']),
            epsilon_start=float(ql['epsilon_start']),
            epsilon_decay=float(ql['epsilon_decay']),
            epsilon_min=float(ql['epsilon_min']),
        )

        return cls(
            arena=arena,
            encoder=encoder,
            rewards=rewards,
            display=display,
            hyperparameters=hyper,
            max_generations=ql.get('max_generations'),
            seed=ql.get('seed'),
        )
