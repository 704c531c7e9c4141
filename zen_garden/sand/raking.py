"""Drag-to-rake state machine for one sand area.

The host translates pointer events into the sand area's local frame
(origin at the area's top-left) and forwards them here::

    Idle ──pointer_down (inside, rake mode on)──▶ Raking
    Raking ──pointer_move (inside)──▶ Raking      (one stroke per move)
    Raking ──pointer_up / pointer_leave / move outside / rake mode off──▶ Idle

``pointer_down`` leaves a mark on its own (a single-point stroke) so a tap
without movement still disturbs the sand.  Leaving Raking forgets the last
point, so the next drag never connects across the gap.

After any call that returns deltas the host re-renders from
:meth:`RakeController.grid` (see :mod:`zen_garden.sand.render`).
"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from zen_garden.sand import patterns
from zen_garden.sand.grid import AccumulationGrid
from zen_garden.sand.patterns import RakeStyle
from zen_garden.sand.strokes import GridCellDelta, generate_stroke, to_grid_cells
from zen_garden.utils.geometry import Point, rect_contains

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIZE = 4.0
DEFAULT_DECAY_RATE = 0.01


class RakeState(str, Enum):
    IDLE = "idle"
    RAKING = "raking"


class RakeController:
    """Turns pointer events into rake strokes on an owned grid.

    Parameters
    ----------
    area_width, area_height : float
        Sand area size in local units.
    cell_size : float
        Grid resolution, default 4.
    style : RakeStyle | str
        Initial rake style, default simple.
    rake_mode : bool
        Whether pointer input rakes the sand on construction, default True.
    decay_rate : float
        Fade used by :meth:`smooth_patterns` when no rate is given.
    rng : numpy.random.Generator, optional
        Jitter source; seed it for reproducible patterns.
    """

    def __init__(
        self,
        area_width: float,
        area_height: float,
        cell_size: float = DEFAULT_CELL_SIZE,
        style: RakeStyle | str = RakeStyle.SIMPLE,
        rake_mode: bool = True,
        decay_rate: float = DEFAULT_DECAY_RATE,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = AccumulationGrid(area_width, area_height, cell_size)
        self.decay_rate = decay_rate
        self.rng = rng if rng is not None else np.random.default_rng()
        self._style = patterns.coerce_style(style)
        self._rake_mode = rake_mode
        self._state = RakeState.IDLE
        self._last_point: Point | None = None

    @classmethod
    def from_config(cls, cfg) -> "RakeController":
        """Build from a validated :class:`~zen_garden.utils.validators.SandGardenV1`.

        The grid covers ``sand_area`` scaled by its size preset; placement
        (``x``, ``y``) belongs to the owning :class:`~zen_garden.garden.elements.SandArea`.
        """
        area = cfg.sand_area
        rng = np.random.default_rng(cfg.rake.seed)
        controller = cls(
            area.display_width,
            area.display_height,
            cell_size=area.cell_size,
            style=cfg.rake.style,
            rake_mode=cfg.rake.rake_mode,
            decay_rate=cfg.decay.rate,
            rng=rng,
        )
        logger.info(
            f"RakeController from config: {area.display_width}x{area.display_height} ({area.size}), "
            f"style={controller.rake_type.value}, rake_mode={cfg.rake.rake_mode}"
        )
        return controller

    # -- state -------------------------------------------------------------

    @property
    def state(self) -> RakeState:
        return self._state

    @property
    def is_raking(self) -> bool:
        return self._state is RakeState.RAKING

    @property
    def last_point(self) -> Point | None:
        return self._last_point

    @property
    def rake_mode(self) -> bool:
        return self._rake_mode

    @property
    def rake_type(self) -> RakeStyle:
        return self._style

    def set_rake_type(self, style: RakeStyle | str) -> None:
        self._style = patterns.coerce_style(style)

    def list_rake_types(self) -> list[RakeStyle]:
        return patterns.list_styles()

    def enable_rake_mode(self) -> None:
        self._rake_mode = True

    def disable_rake_mode(self) -> None:
        self._rake_mode = False
        self._stop()

    def contains(self, x: float, y: float) -> bool:
        """Inclusive bounds test in local coordinates."""
        return rect_contains(x, y, 0.0, 0.0, self.grid.area_width, self.grid.area_height)

    # -- pointer events ----------------------------------------------------

    def pointer_down(self, x: float, y: float) -> list[GridCellDelta]:
        """Start raking at ``(x, y)`` and leave a single-point mark there."""
        if not self._rake_mode or not self.contains(x, y):
            return []
        self._state = RakeState.RAKING
        self._last_point = (x, y)
        return self._rake((x, y), (x, y))

    def pointer_move(self, x: float, y: float) -> list[GridCellDelta]:
        """Extend the current stroke to ``(x, y)``; leaving the area ends it."""
        if not self._rake_mode or not self.is_raking:
            return []
        if not self.contains(x, y):
            self._stop()
            return []
        deltas = []
        if self._last_point is not None:
            deltas = self._rake(self._last_point, (x, y))
        self._last_point = (x, y)
        return deltas

    def pointer_up(self) -> None:
        self._stop()

    def pointer_leave(self) -> None:
        self._stop()

    def _stop(self) -> None:
        self._state = RakeState.IDLE
        self._last_point = None

    def _rake(self, start: Point, end: Point) -> list[GridCellDelta]:
        samples = generate_stroke(start, end, patterns.lookup(self._style), self.rng)
        deltas = to_grid_cells(samples, self.grid.cell_size)
        self.grid.apply_deltas(deltas)
        return deltas

    # -- grid maintenance --------------------------------------------------

    def clear_patterns(self) -> None:
        self.grid.reset()

    def smooth_patterns(self, rate: float | None = None) -> None:
        """One "sand settling" decay step (driven by the host's timer)."""
        self.grid.decay_step(self.decay_rate if rate is None else rate)

    def resize(self, area_width: float, area_height: float) -> None:
        """Change the area size; the grid is rebuilt and any drag ends."""
        self._stop()
        self.grid.resize(area_width, area_height)
