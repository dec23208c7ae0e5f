"""
Entity classes for the simulation.
Defines the fish, the predator, obstacles, actions and the episode state.
"""
import math
from abc import ABC
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Tuple


class Action(IntEnum):
    """Discrete fish actions."""

    STAY = 0
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4


# Screen coordinates: y grows downwards
DEFAULT_ACTION_VECTORS = (
    (0.0, 0.0),
    (0.0, -1.0),
    (0.0, 1.0),
    (-1.0, 0.0),
    (1.0, 0.0),
)


class Entity(ABC):
    """Base class for all moving entities in the arena."""

    def __init__(self, x, y, radius):
        self.x = x
        self.y = y
        self.radius = radius

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def reset(self, x, y):
        """Move entity to a new starting position."""
        self.x = x
        self.y = y


class Fish(Entity):
    """
    The learning agent. Moves one action vector per tick.
    """

    def __repr__(self):
        return f"Fish(x={self.x:.1f}, y={self.y:.1f})"


class Predator(Entity):
    """
    Pure-pursuit hunter. Moves straight at the fish every tick.
    """

    def __repr__(self):
        return f"Predator(x={self.x:.1f}, y={self.y:.1f})"


@dataclass(frozen=True)
class Obstacle:
    """
    Axis-aligned rectangle the fish can hide in.

    `kind` is 'algae' or 'rock'; it only matters for presentation.
    """

    x: float
    y: float
    w: float
    h: float
    kind: str = "algae"

    def contains(self, px, py) -> bool:
        """
        Strict containment test (edges are outside).

        Malformed rectangles and non-finite points are never inside.
        """
        try:
            if not all(math.isfinite(v) for v in (self.x, self.y, self.w, self.h, px, py)):
                return False
            return self.x < px < self.x + self.w and self.y < py < self.y + self.h
        except TypeError:
            return False

    @classmethod
    def from_dict(cls, data):
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            w=float(data["w"]),
            h=float(data["h"]),
            kind=data.get("type", "algae"),
        )


@dataclass
class EpisodeState:
    """
    Mutable state of the running episode.

    Owned by the trainer and passed by reference to the simulator and
    episode manager. The obstacle tuple is shared and never mutated.
    """

    fish: Fish
    predator: Predator
    obstacles: Tuple[Obstacle, ...] = field(default_factory=tuple)
    time_alive: int = 0
    game_over: bool = False
