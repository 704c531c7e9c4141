"""Saturating accumulation grid for one sand area.

The grid stores, per cell, how disturbed the sand is in ``[0, 1]``:
0 is smooth, 1 fully raked.  It is sized
``floor(area_height / cell_size)`` rows × ``floor(area_width / cell_size)``
columns and indexed ``values[y, x]`` (row-major).

Invariants:
    - every write clamps to [0, 1]
    - values only decrease through decay_step() or reset()
    - out-of-bounds deltas are dropped silently (dragging past the edge of
      the sand is normal)
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

import numpy as np

from zen_garden.sand.strokes import GridCellDelta

logger = logging.getLogger(__name__)

SETTLE_EPSILON = 1e-9
"""Values this close to zero after a non-zero decay are snapped to exactly 0."""


class AccumulationGrid:
    """2-D saturating intensity grid.

    Parameters
    ----------
    area_width, area_height : float
        Size of the sand area in length units (>= 0).
    cell_size : float
        Edge length of one cell (> 0), default 4.
    """

    def __init__(self, area_width: float, area_height: float, cell_size: float = 4.0):
        if cell_size <= 0:
            raise ValueError(f"cell_size must be > 0, got {cell_size}")
        self.cell_size = float(cell_size)
        self.values = self._allocate(area_width, area_height)
        logger.info(
            f"AccumulationGrid created: {self.width}x{self.height} cells "
            f"(area {area_width}x{area_height}, cell_size={self.cell_size})"
        )

    def _allocate(self, area_width: float, area_height: float) -> np.ndarray:
        if area_width < 0 or area_height < 0:
            raise ValueError(f"Area size must be >= 0, got {area_width}x{area_height}")
        self.area_width = float(area_width)
        self.area_height = float(area_height)
        cols = math.floor(area_width / self.cell_size)
        rows = math.floor(area_height / self.cell_size)
        return np.zeros((rows, cols), dtype=np.float64)

    @property
    def width(self) -> int:
        """Number of columns."""
        return self.values.shape[1]

    @property
    def height(self) -> int:
        """Number of rows."""
        return self.values.shape[0]

    @property
    def shape(self) -> tuple[int, int]:
        return self.values.shape

    def in_bounds(self, grid_x: int, grid_y: int) -> bool:
        return 0 <= grid_x < self.width and 0 <= grid_y < self.height

    def value(self, grid_x: int, grid_y: int) -> float:
        return float(self.values[grid_y, grid_x])

    def apply_delta(self, cell: GridCellDelta) -> bool:
        """Add ``cell.intensity`` to its cell, saturating at [0, 1].

        Returns
        -------
        bool
            False if the cell lies outside the grid (nothing changed).
        """
        if not self.in_bounds(cell.grid_x, cell.grid_y):
            return False
        current = self.values[cell.grid_y, cell.grid_x]
        self.values[cell.grid_y, cell.grid_x] = min(1.0, max(0.0, current + cell.intensity))
        return True

    def apply_deltas(self, cells: Iterable[GridCellDelta]) -> int:
        """Apply deltas in order; returns how many landed inside the grid."""
        applied = 0
        dropped = 0
        for cell in cells:
            if self.apply_delta(cell):
                applied += 1
            else:
                dropped += 1
        if dropped:
            logger.debug(f"Dropped {dropped} out-of-bounds deltas ({applied} applied)")
        return applied

    def decay_step(self, rate: float) -> None:
        """Fade every cell by ``rate``, never below zero.

        Raises
        ------
        ValueError
            If ``rate`` is negative.
        """
        if rate < 0:
            raise ValueError(f"decay rate must be >= 0, got {rate}")
        faded = self.values - rate
        if rate > 0:
            faded[faded <= SETTLE_EPSILON] = 0.0
        self.values = faded

    def reset(self) -> None:
        """Return every cell to smooth sand (0)."""
        self.values.fill(0.0)
        logger.info("AccumulationGrid cleared")

    def resize(self, area_width: float, area_height: float) -> None:
        """Re-dimension for a new area size; all cells start at 0."""
        self.values = self._allocate(area_width, area_height)
        logger.info(f"AccumulationGrid resized: {self.width}x{self.height} cells")

    def snapshot(self) -> np.ndarray:
        """Copy of the row-major values for a renderer to read."""
        return self.values.copy()

    def to_list(self) -> list[list[float]]:
        """Snapshot as nested Python lists (``rows[y][x]``)."""
        return self.values.tolist()

    def disturbed_count(self, threshold: float = 0.0) -> int:
        """Number of cells with value strictly above ``threshold``."""
        return int(np.count_nonzero(self.values > threshold))
