"""Rake pattern catalog.

Each rake style maps to one immutable :class:`RakePattern` describing how a
stroke spreads across the sand:

==========  =====  =======  ==============  ========
style       width  spacing  base_intensity  shape
==========  =====  =======  ==============  ========
simple      3      4        1.0             straight
wide        6      2        0.8             straight
curved      4      3        1.2             curved
fine        1      1        0.6             straight
==========  =====  =======  ==============  ========

``width`` and ``spacing`` are in sand-area length units.  Lookups never
fail: an unrecognised style resolves to the simple rake.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class RakeStyle(str, Enum):
    """Rake style identifier selectable by the user."""

    SIMPLE = "simple"
    WIDE = "wide"
    CURVED = "curved"
    FINE = "fine"


class ShapeKind(str, Enum):
    """Perpendicular path modulation applied along a stroke."""

    STRAIGHT = "straight"
    CURVED = "curved"
    WAVY = "wavy"


@dataclass(frozen=True, slots=True)
class RakePattern:
    """Shape parameters for one rake style.

    Parameters
    ----------
    name : str
        Display name (e.g. ``"Simple Rake"``).
    width : float
        Perpendicular spread of the tines.  Must be >= 0.
    spacing : float
        Distance between tines across the width.  Must be > 0.
    base_intensity : float
        Nominal disturbance added per sample, before jitter.
    shape : ShapeKind
        Path modulation.
    """

    name: str
    width: float
    spacing: float
    base_intensity: float
    shape: ShapeKind = ShapeKind.STRAIGHT

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError(f"width must be >= 0, got {self.width}")
        if self.spacing <= 0:
            raise ValueError(f"spacing must be > 0, got {self.spacing}")


_CATALOG: dict[RakeStyle, RakePattern] = {
    RakeStyle.SIMPLE: RakePattern("Simple Rake", 3, 4, 1.0, ShapeKind.STRAIGHT),
    RakeStyle.WIDE: RakePattern("Wide Rake", 6, 2, 0.8, ShapeKind.STRAIGHT),
    RakeStyle.CURVED: RakePattern("Curved Rake", 4, 3, 1.2, ShapeKind.CURVED),
    RakeStyle.FINE: RakePattern("Fine Rake", 1, 1, 0.6, ShapeKind.STRAIGHT),
}


def coerce_style(style: RakeStyle | str) -> RakeStyle:
    """Resolve ``style`` (enum or its string value) to a RakeStyle.

    Unknown values fall back to :attr:`RakeStyle.SIMPLE`.
    """
    if isinstance(style, RakeStyle):
        return style
    try:
        return RakeStyle(str(style).lower())
    except ValueError:
        logger.warning(f"Unknown rake style {style!r}; falling back to 'simple'")
        return RakeStyle.SIMPLE


def lookup(style: RakeStyle | str) -> RakePattern:
    """Return the pattern for ``style`` (simple rake if unrecognised)."""
    return _CATALOG.get(coerce_style(style), _CATALOG[RakeStyle.SIMPLE])


def list_styles() -> list[RakeStyle]:
    """All styles in catalog order: simple, wide, curved, fine."""
    return list(_CATALOG)
