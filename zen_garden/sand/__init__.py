"""Sand raking core.

Modules:
    - patterns: rake style → RakePattern catalog
    - strokes: stroke sampling and grid rasterization
    - grid: saturating AccumulationGrid with decay
    - raking: pointer-driven Idle/Raking state machine
    - render: grid → line marks (+ Pillow preview renderer)

Invariants:
    - Grid values stay in [0, 1]
    - Stroke jitter is Uniform[0.8, 1.2) per sample, source injectable
    - Nothing here depends on a rendering engine
"""

from zen_garden.sand.grid import AccumulationGrid
from zen_garden.sand.patterns import RakePattern, RakeStyle, ShapeKind, list_styles, lookup
from zen_garden.sand.raking import RakeController, RakeState
from zen_garden.sand.strokes import (
    GridCellDelta,
    RakeStroke,
    StrokeSample,
    create_rake_stroke,
    generate_stroke,
    to_grid_cells,
)

__all__ = [
    "AccumulationGrid",
    "GridCellDelta",
    "RakeController",
    "RakePattern",
    "RakeState",
    "RakeStroke",
    "RakeStyle",
    "ShapeKind",
    "StrokeSample",
    "create_rake_stroke",
    "generate_stroke",
    "list_styles",
    "lookup",
    "to_grid_cells",
]
