#!/usr/bin/env python3
"""Headless rake preview tool.

Replays a pointer drag over a sand area through the raking core and writes
the resulting pattern as an image plus a metadata file.

Usage:
    # Default config, simple rake, a diagonal drag
    python scripts/preview_rake.py --path 10,10 120,80 200,40

    # Wide rake, seeded jitter, then let the sand settle for 30 steps
    python scripts/preview_rake.py --config configs/sand_garden.v1.yaml \
        --style wide --seed 7 --decay-steps 30 --path 20,20 380,20 380,280

    # Path in world coordinates, translated by the configured sand_area.x/y
    python scripts/preview_rake.py --config configs/sand_garden.v1.yaml \
        --world --path 120,100 300,100

Outputs (in --output_dir):
    - rake_preview.png: sand with one line per disturbed cell
    - metadata.yaml: config summary, path, timing, grid statistics
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from zen_garden.garden.elements import SandArea
from zen_garden.sand.raking import RakeController
from zen_garden.sand.render import render_grid_image
from zen_garden.utils import fs, logging_config, profiler, validators

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Replay a rake drag and render the sand pattern",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to sand_garden.v1.yaml (defaults built in if omitted)'
    )
    parser.add_argument(
        '--path',
        nargs='+',
        required=True,
        help='Pointer positions as x,y (sand-area local units unless --world)'
    )
    parser.add_argument(
        '--style',
        choices=list(validators.RAKE_STYLE_NAMES),
        default=None,
        help='Override the configured rake style'
    )
    parser.add_argument(
        '--world',
        action='store_true',
        help='Treat --path as world coordinates (offset by sand_area.x/y)'
    )
    parser.add_argument('--seed', type=int, default=None, help='Override the jitter seed')
    parser.add_argument(
        '--decay-steps',
        type=int,
        default=0,
        help='Number of settling steps to apply after the drag, default: 0'
    )
    parser.add_argument(
        '--output_dir',
        type=str,
        default='outputs/preview_rake',
        help='Output directory, default: outputs/preview_rake'
    )
    parser.add_argument('--verbose', action='store_true', help='Enable DEBUG logging')
    return parser.parse_args(argv)


def parse_path(points: Sequence[str]) -> List[Tuple[float, float]]:
    """Parse ``["x,y", ...]`` into float pairs.

    Raises
    ------
    ValueError
        If a point is not two comma-separated numbers
    """
    path = []
    for raw in points:
        parts = raw.split(',')
        if len(parts) != 2:
            raise ValueError(f"Path point must be 'x,y', got {raw!r}")
        path.append((float(parts[0]), float(parts[1])))
    return path


def replay_path(controller: RakeController, path: Sequence[Tuple[float, float]]) -> int:
    """Feed ``path`` as down / move... / up; returns the number of deltas produced."""
    if not path:
        return 0
    produced = len(controller.pointer_down(*path[0]))
    for x, y in path[1:]:
        produced += len(controller.pointer_move(x, y))
    controller.pointer_up()
    return produced


def preview_main(
    cfg: validators.SandGardenV1,
    path: Sequence[Tuple[float, float]],
    output_dir: Path,
    decay_steps: int = 0,
    world_coords: bool = False,
) -> Dict[str, Any]:
    """Replay ``path`` under ``cfg`` and write the preview artifacts.

    With ``world_coords`` the path is translated into the sand area's local
    frame using the configured placement (``sand_area.x`` / ``sand_area.y``).

    Returns
    -------
    dict
        {"image_path", "metadata_path", "disturbed_cells", "deltas", "replay_time_s"}
    """
    area = SandArea.from_config(cfg, id="preview")
    controller = area.controller
    if world_coords:
        path = [area.to_local(x, y) for x, y in path]

    timings: Dict[str, float] = {}
    with profiler.timer('replay', sink=timings.__setitem__):
        deltas = replay_path(controller, path)
        for _ in range(decay_steps):
            controller.smooth_patterns()

    values = controller.grid.snapshot()
    image = render_grid_image(
        values,
        controller.grid.cell_size,
        mark_threshold=cfg.render.mark_threshold,
        reinforce_threshold=cfg.render.reinforce_threshold,
        reinforce_offset=cfg.render.reinforce_offset,
    )

    output_dir = fs.ensure_dir(output_dir)
    image_path = output_dir / 'rake_preview.png'
    fs.atomic_save_image(image, image_path)
    logger.info(f"Saved preview: {image_path}")

    disturbed = controller.grid.disturbed_count()
    metadata = {
        'rake_style': controller.rake_type.value,
        'seed': cfg.rake.seed,
        'sand_area': cfg.sand_area.model_dump(),
        'grid_shape': [controller.grid.height, controller.grid.width],
        'path': [list(p) for p in path],
        'deltas': deltas,
        'decay_steps': decay_steps,
        'disturbed_cells': disturbed,
        'max_value': float(np.max(values)) if values.size else 0.0,
        'replay_time_s': float(timings['replay']),
    }
    metadata_path = output_dir / 'metadata.yaml'
    fs.atomic_yaml_dump(metadata, metadata_path)
    logger.info(f"Saved metadata: {metadata_path}")

    return {
        'image_path': str(image_path),
        'metadata_path': str(metadata_path),
        'disturbed_cells': disturbed,
        'deltas': deltas,
        'replay_time_s': metadata['replay_time_s'],
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.config:
        cfg = validators.load_sand_garden_config(args.config)
    else:
        cfg = validators.SandGardenV1()

    if args.style:
        cfg.rake.style = args.style
    if args.seed is not None:
        cfg.rake.seed = args.seed

    logging_config.setup_logging(
        log_level="DEBUG" if args.verbose else cfg.logging.level,
        log_file=cfg.logging.file,
        json=cfg.logging.json_lines,
        context={"app": "preview_rake"},
    )
    logging_config.install_excepthook()

    path = parse_path(args.path)
    logger.info(f"Replaying {len(path)} pointer positions with rake '{cfg.rake.style}'")

    result = preview_main(
        cfg, path, Path(args.output_dir), decay_steps=args.decay_steps, world_coords=args.world
    )
    logger.info(
        f"Preview complete: {result['disturbed_cells']} disturbed cells "
        f"in {result['replay_time_s']:.4f}s"
    )
    logging_config.shutdown()
    return 0


if __name__ == '__main__':
    sys.exit(main())
