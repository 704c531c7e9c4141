"""Planar geometry helpers shared by the stroke generator and raking controller.

Provides:
    - distance(): Euclidean distance between two points
    - unit_perpendicular(): 90° rotation of a direction vector, normalized
    - rect_contains(): inclusive point-in-rectangle test
    - floor_div_cell(): continuous coordinate → integer cell index

All coordinates are sand-area length units (top-left origin, +Y down).
"""

import math
from typing import Tuple

Point = Tuple[float, float]


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between ``a`` and ``b``."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def unit_perpendicular(dx: float, dy: float) -> Point:
    """Unit vector rotated 90° from ``(dx, dy)``.

    Parameters
    ----------
    dx, dy : float
        Direction vector; must be non-zero

    Returns
    -------
    Point
        ``(-dy, dx) / |(dx, dy)|``

    Raises
    ------
    ValueError
        If the vector has zero length
    """
    length = math.hypot(dx, dy)
    if length == 0.0:
        raise ValueError("Cannot take the perpendicular of a zero-length vector")
    return (-dy / length, dx / length)


def rect_contains(x: float, y: float, left: float, top: float, width: float, height: float) -> bool:
    """Inclusive containment test; empty rectangles contain nothing."""
    if width <= 0 or height <= 0:
        return False
    return left <= x <= left + width and top <= y <= top + height


def floor_div_cell(value: float, origin: float, cell_size: float) -> int:
    """Index of the cell containing ``value`` on a grid anchored at ``origin``."""
    return math.floor((value - origin) / cell_size)
