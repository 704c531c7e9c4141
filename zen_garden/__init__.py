"""Zen Garden: sand raking core for an interactive garden simulator.

This package turns pointer drags over a sand area into raked patterns on a
saturating grid that any renderer can draw.

Architecture layers (strict one-way dependency):
    scripts/ → zen_garden/{garden,sand}/ → zen_garden/utils/

Key invariants:
    - Coordinates are sand-area local (top-left origin, +Y down)
    - Grid values are in [0, 1]; writes saturate, only decay fades
    - YAML-only configs, validated with pydantic
"""

__version__ = "1.0.0"
