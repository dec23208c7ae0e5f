"""
World class - the bounded arena and its movement rules.
"""
import math
from typing import Tuple

from .entities import Fish, Predator, Obstacle
from .utils import clamp, get_bearing, get_distance, is_finite_point


class World:
    """
    The arena in which the fish and the predator move.
    Owns the fixed obstacle set and every movement/collision rule.
    """

    def __init__(self, arena):
        """
        Initialize the world.

        Args:
            arena: ArenaConfig with dimensions, speeds and obstacles
        """
        self.arena = arena
        self.width = arena.width
        self.height = arena.height
        self.obstacles: Tuple[Obstacle, ...] = tuple(arena.obstacles)

    def in_any_obstacle(self, x, y) -> bool:
        """Check whether a point lies strictly inside any obstacle."""
        return any(obs.contains(x, y) for obs in self.obstacles)

    def clamp_fish(self, x, y):
        """Keep the fish fully inside the arena."""
        r = self.arena.fish_radius
        return clamp(x, r, self.width - r), clamp(y, r, self.height - r)

    def clamp_predator(self, x, y):
        return clamp(x, 0.0, self.width), clamp(y, 0.0, self.height)

    def move_fish(self, fish: Fish, action: int):
        """
        Move the fish along an action vector.

        Args:
            fish: Fish to move
            action: Action index
        """
        dx, dy = self.arena.action_vectors[action]
        next_x = fish.x + dx * self.arena.fish_speed
        next_y = fish.y + dy * self.arena.fish_speed

        # Non-finite moves are dropped
        if not is_finite_point(next_x, next_y):
            return

        fish.x, fish.y = self.clamp_fish(next_x, next_y)

    def predator_speed(self, predator: Predator) -> float:
        """
        Current pursuit speed. Obstacles slow the predator down.

        Evaluated on the predator's position before it moves this tick.
        """
        speed = self.arena.predator_speed
        if self.in_any_obstacle(predator.x, predator.y):
            speed *= self.arena.predator_obstacle_slowdown
        return speed

    def move_predator(self, predator: Predator, fish: Fish):
        """
        Move the predator straight at the fish (pure pursuit).

        Args:
            predator: Predator to move
            fish: Fish being chased (already moved this tick)
        """
        speed = self.predator_speed(predator)
        angle = get_bearing(predator.x, predator.y, fish.x, fish.y)

        next_x = predator.x + math.cos(angle) * speed
        next_y = predator.y + math.sin(angle) * speed

        if not is_finite_point(next_x, next_y):
            return

        predator.x, predator.y = self.clamp_predator(next_x, next_y)

    def is_capture(self, fish: Fish, predator: Predator) -> bool:
        """Check whether the predator has caught the fish."""
        return get_distance(fish.x, fish.y, predator.x, predator.y) < fish.radius + predator.radius

    def spawn_fish(self, fish: Fish, rng):
        """
        Place the fish near the centre with bounded jitter.

        Args:
            fish: Fish to place
            rng: numpy Generator
        """
        jitter = self.arena.spawn_jitter
        x = self.width / 2 + (rng.random() - 0.5) * 2 * jitter
        y = self.height / 2 + (rng.random() - 0.5) * 2 * jitter
        fish.reset(*self.clamp_fish(x, y))

    def corners(self):
        """Predator spawn points, inset from each arena corner."""
        m = self.arena.corner_margin
        return [
            (m, m), (self.width - m, m),
            (m, self.height - m), (self.width - m, self.height - m),
        ]

    def spawn_predator(self, predator: Predator, rng):
        """Place the predator in a random corner."""
        corners = self.corners()
        x, y = corners[int(rng.integers(len(corners)))]
        predator.reset(*self.clamp_predator(x, y))
