"""Garden elements and the registry that holds them.

Elements are a closed set of tagged variants sharing the same
capabilities (id, position, rotation, scale):

    - Stone
    - Plant
    - SandArea (additionally owns a RakeController sized to its footprint)

Behaviour is plain functions dispatching on ``element.kind`` rather than
methods overridden down a class hierarchy.  The :class:`Garden` registry is
passed explicitly to whoever needs the other elements; nothing reads it
from ambient scene state.

Positions are element centres in world units; rotation is in degrees.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

import numpy as np

from zen_garden.sand.raking import DEFAULT_CELL_SIZE, RakeController
from zen_garden.utils.validators import SAND_AREA_SIZE_SCALE

logger = logging.getLogger(__name__)

ROTATION_STEP_DEG = 15.0
DEFAULT_SNAP_GRID = 32.0

_id_counter = itertools.count(1)


class ElementKind(str, Enum):
    STONE = "stone"
    PLANT = "plant"
    SAND = "sand"


class SandAreaSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


SIZE_SCALE = {size: SAND_AREA_SIZE_SCALE[size.value] for size in SandAreaSize}


def _next_id(kind: ElementKind) -> str:
    return f"{kind.value}_{next(_id_counter):05d}"


@dataclass
class Stone:
    x: float
    y: float
    rotation: float = 0.0
    scale: float = 1.0
    id: str = ""
    kind: ElementKind = field(default=ElementKind.STONE, init=False)

    def __post_init__(self) -> None:
        self.id = self.id or _next_id(self.kind)


@dataclass
class Plant:
    x: float
    y: float
    rotation: float = 0.0
    scale: float = 1.0
    id: str = ""
    kind: ElementKind = field(default=ElementKind.PLANT, init=False)

    def __post_init__(self) -> None:
        self.id = self.id or _next_id(self.kind)


@dataclass
class SandArea:
    """Rakeable sand patch centred on (x, y).

    ``base_width`` × ``base_height`` is the footprint at medium size; the
    size preset scales it and the owned controller's grid follows.
    """

    x: float
    y: float
    base_width: float = 200.0
    base_height: float = 150.0
    size: SandAreaSize = SandAreaSize.MEDIUM
    cell_size: float = DEFAULT_CELL_SIZE
    rotation: float = 0.0
    id: str = ""
    rng: np.random.Generator | None = field(default=None, repr=False)
    kind: ElementKind = field(default=ElementKind.SAND, init=False)
    controller: RakeController = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.id = self.id or _next_id(self.kind)
        self.size = SandAreaSize(self.size)
        self.controller = RakeController(
            self.display_width, self.display_height, cell_size=self.cell_size, rng=self.rng
        )

    @classmethod
    def from_config(cls, cfg, id: str = "") -> "SandArea":
        """Place a sand area from a validated ``SandGardenV1``.

        ``sand_area.x`` / ``sand_area.y`` give the top-left corner; the
        element is stored by its centre like every other element.
        """
        area = cfg.sand_area
        sand = cls(
            area.x + area.display_width / 2,
            area.y + area.display_height / 2,
            base_width=area.width,
            base_height=area.height,
            size=area.size,
            cell_size=area.cell_size,
            id=id,
        )
        sand.controller = RakeController.from_config(cfg)
        sand.rng = sand.controller.rng
        return sand

    @property
    def scale(self) -> float:
        return SIZE_SCALE[self.size]

    @property
    def display_width(self) -> float:
        return self.base_width * self.scale

    @property
    def display_height(self) -> float:
        return self.base_height * self.scale

    def set_area_size(self, size: SandAreaSize | str) -> None:
        """Switch size preset; the raked pattern is discarded."""
        self.size = SandAreaSize(size)
        self.controller.resize(self.display_width, self.display_height)
        logger.info(f"{self.id} resized to {self.size.value}")

    def to_local(self, world_x: float, world_y: float) -> tuple[float, float]:
        """World point → local frame with origin at the area's top-left."""
        return (
            world_x - (self.x - self.display_width / 2),
            world_y - (self.y - self.display_height / 2),
        )


Element = Union[Stone, Plant, SandArea]


def move_to(element: Element, x: float, y: float) -> None:
    element.x = x
    element.y = y


def rotate(element: Element, steps: int = 1) -> float:
    """Rotate by ``steps`` × 15°, wrapping into [0, 360); returns the new angle."""
    element.rotation = (element.rotation + steps * ROTATION_STEP_DEG) % 360.0
    return element.rotation


def snap_to_grid(element: Element, grid_size: float) -> None:
    if grid_size <= 0:
        raise ValueError(f"grid_size must be > 0, got {grid_size}")
    element.x = round(element.x / grid_size) * grid_size
    element.y = round(element.y / grid_size) * grid_size


def element_state(element: Element) -> dict:
    """Plain-data snapshot of an element (YAML/JSON friendly)."""
    state = {
        'id': element.id,
        'type': element.kind.value,
        'x': float(element.x),
        'y': float(element.y),
        'rotation': float(element.rotation),
        'scale': float(element.scale),
    }
    if element.kind is ElementKind.SAND:
        grid = element.controller.grid
        state['custom'] = {
            'size': element.size.value,
            'rake_style': element.controller.rake_type.value,
            'grid_shape': [grid.height, grid.width],
            'disturbed_cells': grid.disturbed_count(),
        }
    return state


class Garden:
    """Registry of placed elements with single selection and optional snapping.

    Parameters
    ----------
    grid_size : float
        Snap grid spacing, default 32.
    snap_to_grid : bool
        Snap elements on add (and all existing ones when enabled later).
    """

    def __init__(self, grid_size: float = DEFAULT_SNAP_GRID, snap_to_grid: bool = False):
        self._elements: dict[str, Element] = {}
        self._selected: str | None = None
        self.grid_size = grid_size
        self.snap = snap_to_grid

    def add(self, element: Element) -> Element:
        self._elements[element.id] = element
        if self.snap:
            snap_to_grid(element, self.grid_size)
        logger.debug(f"Added {element.id} at ({element.x}, {element.y})")
        return element

    def remove(self, element_id: str) -> bool:
        if element_id not in self._elements:
            return False
        if self._selected == element_id:
            self._selected = None
        del self._elements[element_id]
        return True

    def get(self, element_id: str) -> Element | None:
        return self._elements.get(element_id)

    def elements(self) -> list[Element]:
        return list(self._elements.values())

    def sand_areas(self) -> list[SandArea]:
        return [e for e in self._elements.values() if e.kind is ElementKind.SAND]

    def select(self, element_id: str) -> bool:
        if element_id not in self._elements:
            return False
        self._selected = element_id
        return True

    def deselect(self) -> None:
        self._selected = None

    @property
    def selected(self) -> Element | None:
        return self._elements.get(self._selected) if self._selected else None

    def set_snap_to_grid(self, enabled: bool) -> None:
        self.snap = enabled
        if enabled:
            for element in self._elements.values():
                snap_to_grid(element, self.grid_size)

    def set_grid_size(self, size: float) -> None:
        self.grid_size = size
        if self.snap:
            for element in self._elements.values():
                snap_to_grid(element, self.grid_size)

    def clear(self) -> None:
        self._elements.clear()
        self._selected = None

    def get_state(self) -> list[dict]:
        return [element_state(e) for e in self._elements.values()]
