"""Grid → line marks, the data a host renderer draws.

The sand core never draws.  It hands out :class:`LineMark` segments:
one horizontal line along the top edge of every cell whose value exceeds
``mark_threshold`` and, for cells above ``reinforce_threshold``, a second
line ``reinforce_offset`` units lower.  Any object with a
``draw(marks)`` method satisfies :class:`GridRenderer`.

:func:`render_grid_image` is the headless renderer used by the preview
script: sand-coloured background, darker sand lines, via Pillow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np
from PIL import Image, ImageDraw

SAND_COLOR = (0xF5, 0xDE, 0xB3)
LINE_COLOR = (0x8B, 0x73, 0x55)


@dataclass(frozen=True, slots=True)
class LineMark:
    """Straight segment in the same frame as the grid origin."""

    x0: float
    y0: float
    x1: float
    y1: float
    reinforcing: bool = False


class GridRenderer(Protocol):
    def draw(self, marks: Sequence[LineMark]) -> None: ...


def grid_marks(
    values: np.ndarray,
    cell_size: float,
    origin: tuple[float, float] = (0.0, 0.0),
    mark_threshold: float = 0.0,
    reinforce_threshold: float = 0.5,
    reinforce_offset: float = 2.0,
) -> list[LineMark]:
    """Line segments for every disturbed cell, row-major order.

    Parameters
    ----------
    values : np.ndarray
        Grid snapshot, shape (rows, cols).
    cell_size : float
        Cell edge length.
    origin : tuple[float, float]
        Position of cell (0, 0)'s top-left corner in the output frame.
    """
    ox, oy = origin
    marks = []
    rows, cols = np.nonzero(np.asarray(values) > mark_threshold)
    for gy, gx in zip(rows.tolist(), cols.tolist()):
        px = ox + gx * cell_size
        py = oy + gy * cell_size
        marks.append(LineMark(px, py, px + cell_size, py))
        if values[gy, gx] > reinforce_threshold:
            marks.append(LineMark(px, py + reinforce_offset, px + cell_size, py + reinforce_offset, True))
    return marks


class PillowRenderer:
    """GridRenderer that draws marks onto a Pillow RGB image."""

    def __init__(self, width: int, height: int, line_width: int = 2):
        self.image = Image.new("RGB", (max(1, width), max(1, height)), SAND_COLOR)
        self.line_width = line_width
        self._draw = ImageDraw.Draw(self.image)

    def draw(self, marks: Sequence[LineMark]) -> None:
        for m in marks:
            self._draw.line([(m.x0, m.y0), (m.x1, m.y1)], fill=LINE_COLOR, width=self.line_width)


def render_grid_image(
    values: np.ndarray,
    cell_size: float,
    mark_threshold: float = 0.0,
    reinforce_threshold: float = 0.5,
    reinforce_offset: float = 2.0,
) -> Image.Image:
    """Render a grid snapshot to an image sized to the grid's area."""
    rows, cols = np.asarray(values).shape
    renderer = PillowRenderer(int(round(cols * cell_size)), int(round(rows * cell_size)))
    renderer.draw(grid_marks(
        values,
        cell_size,
        mark_threshold=mark_threshold,
        reinforce_threshold=reinforce_threshold,
        reinforce_offset=reinforce_offset,
    ))
    return renderer.image
