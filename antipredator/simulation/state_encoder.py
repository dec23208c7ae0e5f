"""
Discretization of the continuous arena into Q-table state keys.

A key summarizes what matters for evasion: where the threat is coming
from, how close it is, which walls are near and whether the fish is
hidden. Keys look like ``"3|CLOSE|0100|1"``.
"""
import math
from collections import namedtuple

from .utils import get_bearing, get_distance

N_OCTANTS = 8

CRITICAL = 'CRITICAL'
CLOSE = 'CLOSE'
FAR = 'FAR'
DISTANCE_TIERS = (CRITICAL, CLOSE, FAR)

KEY_SEPARATOR = '|'

StateFeatures = namedtuple(
    'StateFeatures',
    ('octant', 'tier', 'wall_north', 'wall_south', 'wall_west', 'wall_east', 'hiding'),
)


class StateEncoder:
    """
    Maps (fish position, predator position, obstacles) to a state key.

    Pure: identical inputs always give identical keys.
    """

    def __init__(self, width, height, encoder_config):
        """
        Args:
            width: Arena width
            height: Arena height
            encoder_config: EncoderConfig with tier and wall thresholds
        """
        self.width = width
        self.height = height
        self.critical_distance = encoder_config.critical_distance
        self.close_distance = encoder_config.close_distance
        self.wall_margin = encoder_config.wall_margin

    @staticmethod
    def octant(fish_pos, predator_pos) -> int:
        """Bucket the bearing fish -> predator into one of 8 sectors."""
        angle = get_bearing(fish_pos[0], fish_pos[1], predator_pos[0], predator_pos[1])
        # +pi and -pi are the same direction
        return int(math.floor(((angle + math.pi) / (2 * math.pi)) * N_OCTANTS)) % N_OCTANTS

    def distance_tier(self, distance) -> str:
        if distance < self.critical_distance:
            return CRITICAL
        if distance < self.close_distance:
            return CLOSE
        return FAR

    @staticmethod
    def tier_index(tier) -> int:
        return DISTANCE_TIERS.index(tier)

    def wall_flags(self, x, y):
        """Proximity to the north, south, west and east walls."""
        m = self.wall_margin
        return (y < m, y > self.height - m, x < m, x > self.width - m)

    def features(self, fish_pos, predator_pos, obstacles) -> StateFeatures:
        """
        Compute the discrete features of a state.

        Args:
            fish_pos: (x, y) of the fish
            predator_pos: (x, y) of the predator
            obstacles: Iterable of Obstacle

        Returns:
            StateFeatures
        """
        distance = get_distance(fish_pos[0], fish_pos[1], predator_pos[0], predator_pos[1])
        north, south, west, east = self.wall_flags(fish_pos[0], fish_pos[1])
        hiding = any(obs.contains(fish_pos[0], fish_pos[1]) for obs in obstacles)

        return StateFeatures(
            octant=self.octant(fish_pos, predator_pos),
            tier=self.distance_tier(distance),
            wall_north=north,
            wall_south=south,
            wall_west=west,
            wall_east=east,
            hiding=hiding,
        )

    def encode(self, fish_pos, predator_pos, obstacles) -> str:
        """
        Build the Q-table key for a state.

        Returns:
            str: '<octant>|<tier>|<NSWE bits>|<hiding bit>'
        """
        f = self.features(fish_pos, predator_pos, obstacles)
        walls = ''.join('1' if flag else '0'
                        for flag in (f.wall_north, f.wall_south, f.wall_west, f.wall_east))
        return KEY_SEPARATOR.join((str(f.octant), f.tier, walls, '1' if f.hiding else '0'))
