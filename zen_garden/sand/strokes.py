"""Rake stroke generation and grid rasterization.

A stroke is the disturbance left by dragging a rake from ``start`` to
``end``.  It is sampled as a lattice of points:

    - longitudinally, one base point roughly every 2 units of path length
      (``steps = floor(distance / 2)``, ``steps + 1`` base points);
    - across the rake, tines at ``w = -width/2, -width/2 + spacing, ...``
      while ``w <= width/2``;
    - each point pushed along the unit perpendicular by the tine offset and
      by the pattern's shape modulation (curved / wavy).

Every sample's intensity is ``base_intensity * U`` with ``U`` drawn
independently from Uniform[0.8, 1.2).  A zero-length (or < 2 unit) drag
yields a single jittered sample at ``start``.  A drag whose length is not
finite (NaN or infinite endpoints) yields no samples.

Samples map onto grid cells by flooring ``(coord - origin) / cell_size``;
one delta per sample, in generation order, without de-duplication.
Samples with a non-finite coordinate are skipped.

Usage::

    from zen_garden.sand import patterns, strokes

    samples = strokes.generate_stroke((0, 0), (20, 0), patterns.lookup("simple"))
    cells = strokes.to_grid_cells(samples, cell_size=4)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from zen_garden.sand.patterns import RakePattern, RakeStyle, ShapeKind, lookup
from zen_garden.utils.geometry import Point, distance, floor_div_cell, unit_perpendicular

logger = logging.getLogger(__name__)

SAMPLE_STEP = 2.0
"""Path length covered by one longitudinal step."""

JITTER_LOW = 0.8
JITTER_HIGH = 1.2

_default_rng = np.random.default_rng()


@dataclass(frozen=True, slots=True)
class StrokeSample:
    """One sampled point of a stroke (intensity may exceed 1)."""

    x: float
    y: float
    intensity: float


@dataclass(frozen=True, slots=True)
class GridCellDelta:
    """Intensity contribution for one grid cell."""

    grid_x: int
    grid_y: int
    intensity: float


def _shape_offset(shape: ShapeKind, i: int, steps: int) -> float:
    t = i / steps
    if shape is ShapeKind.CURVED:
        return math.sin(t * math.pi) * 2.0
    if shape is ShapeKind.WAVY:
        return math.sin(t * math.pi * 4.0) * 1.0
    return 0.0


def _tine_offsets(pattern: RakePattern) -> list[float]:
    # Summed step by step; the last tine depends on float accumulation.
    half = pattern.width / 2
    offsets = []
    w = -half
    while w <= half:
        offsets.append(w)
        w += pattern.spacing
    return offsets


def generate_stroke(
    start: Point,
    end: Point,
    pattern: RakePattern,
    rng: np.random.Generator | None = None,
) -> list[StrokeSample]:
    """Sample the sand disturbed by dragging ``pattern`` from ``start`` to ``end``.

    Parameters
    ----------
    start, end : tuple[float, float]
        Path endpoints in sand-area coordinates.
    pattern : RakePattern
        Rake shape parameters.
    rng : numpy.random.Generator, optional
        Jitter source.  Defaults to a module-level unseeded generator; pass a
        seeded one for reproducible strokes.

    Returns
    -------
    list[StrokeSample]
        Samples in generation order (longitudinal-major, tine-minor).
    """
    rng = _default_rng if rng is None else rng
    sx, sy = float(start[0]), float(start[1])
    ex, ey = float(end[0]), float(end[1])

    length = distance((sx, sy), (ex, ey))
    if not math.isfinite(length):
        logger.debug(f"Non-finite stroke ({sx},{sy})->({ex},{ey}) produces no samples")
        return []

    steps = math.floor(length / SAMPLE_STEP)
    if steps <= 0:
        jitter = rng.uniform(JITTER_LOW, JITTER_HIGH)
        return [StrokeSample(sx, sy, pattern.base_intensity * jitter)]

    dx = (ex - sx) / steps
    dy = (ey - sy) / steps
    px, py = unit_perpendicular(dx, dy)
    offsets = _tine_offsets(pattern)

    jitter = rng.uniform(JITTER_LOW, JITTER_HIGH, size=(steps + 1) * len(offsets))

    samples = []
    k = 0
    for i in range(steps + 1):
        base_x = sx + dx * i
        base_y = sy + dy * i
        shift = _shape_offset(pattern.shape, i, steps)
        for w in offsets:
            samples.append(StrokeSample(
                base_x + px * w + px * shift,
                base_y + py * w + py * shift,
                pattern.base_intensity * float(jitter[k]),
            ))
            k += 1

    logger.debug(
        f"Stroke ({sx:.1f},{sy:.1f})->({ex:.1f},{ey:.1f}) "
        f"[{pattern.name}]: {steps + 1} steps x {len(offsets)} tines"
    )
    return samples


def to_grid_cells(
    samples: Iterable[StrokeSample],
    cell_size: float,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
) -> list[GridCellDelta]:
    """Map samples onto integer grid cells, one delta per finite sample.

    Raises
    ------
    ValueError
        If ``cell_size`` is not positive.
    """
    if cell_size <= 0:
        raise ValueError(f"cell_size must be > 0, got {cell_size}")
    return [
        GridCellDelta(
            floor_div_cell(s.x, origin_x, cell_size),
            floor_div_cell(s.y, origin_y, cell_size),
            s.intensity,
        )
        for s in samples
        if math.isfinite(s.x) and math.isfinite(s.y)
    ]


@dataclass(frozen=True)
class RakeStroke:
    """A generated stroke together with the inputs that produced it."""

    start: Point
    end: Point
    pattern: RakePattern
    samples: tuple[StrokeSample, ...] = field(default=())

    def grid_cells(
        self, cell_size: float, origin_x: float = 0.0, origin_y: float = 0.0
    ) -> list[GridCellDelta]:
        return to_grid_cells(self.samples, cell_size, origin_x, origin_y)


def create_rake_stroke(
    start: Point,
    end: Point,
    style: RakeStyle | str,
    rng: np.random.Generator | None = None,
) -> RakeStroke:
    """Look up ``style`` and generate the stroke from ``start`` to ``end``."""
    pattern = lookup(style)
    samples = generate_stroke(start, end, pattern, rng)
    return RakeStroke(tuple(start), tuple(end), pattern, tuple(samples))
