"""Garden element model: Stone, Plant, SandArea and the Garden registry."""

from zen_garden.garden.elements import (
    ElementKind,
    Garden,
    Plant,
    SandArea,
    SandAreaSize,
    Stone,
    element_state,
    move_to,
    rotate,
    snap_to_grid,
)

__all__ = [
    "ElementKind",
    "Garden",
    "Plant",
    "SandArea",
    "SandAreaSize",
    "Stone",
    "element_state",
    "move_to",
    "rotate",
    "snap_to_grid",
]
