"""
Geometry helpers for the simulation.
"""
import math


def get_distance(x1, y1, x2, y2):
    """
    Calculate Euclidean distance between two points.

    Args:
        x1, y1: First point coordinates
        x2, y2: Second point coordinates

    Returns:
        float: Distance
    """
    return math.hypot(x2 - x1, y2 - y1)


def get_bearing(x1, y1, x2, y2):
    """
    Calculate the angle of the vector pointing from the first point to the second.

    Coincident points and non-finite deltas have a bearing of 0.

    Args:
        x1, y1: Origin point
        x2, y2: Target point

    Returns:
        float: Angle in radians in [-pi, pi]
    """
    dx = x2 - x1
    dy = y2 - y1

    if not (math.isfinite(dx) and math.isfinite(dy)):
        return 0.0
    if dx == 0 and dy == 0:
        return 0.0

    return math.atan2(dy, dx)


def clamp(value, low, high):
    """
    Clamp a value into [low, high].

    Args:
        value: Value to clamp
        low: Lower bound
        high: Upper bound

    Returns:
        float: Clamped value
    """
    return max(low, min(high, value))


def is_finite_point(x, y):
    """Check that both coordinates are finite numbers."""
    try:
        return math.isfinite(x) and math.isfinite(y)
    except TypeError:
        return False
