"""Immutable simulation frame handed to rendering collaborators."""

from dataclasses import dataclass, field
from typing import Tuple

from .entities import Obstacle


@dataclass(frozen=True)
class SimulationSnapshot:
    """Read-only copy of everything a renderer needs for one frame."""

    fish: Tuple[float, float]
    predator: Tuple[float, float]
    obstacles: Tuple[Obstacle, ...]
    time_alive: int
    game_over: bool
    epsilon: float
    discovered_states: int
    generation: int
    best_time: int
    last_time: int
    arena_size: Tuple[float, float] = (600.0, 400.0)
    fish_radius: float = 12.0
    predator_radius: float = 20.0
    steps_per_tick: int = 1
    show_sensors: bool = True
    score_history: Tuple[int, ...] = field(default_factory=tuple)
