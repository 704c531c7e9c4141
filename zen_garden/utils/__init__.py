"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - Planar geometry (geometry)
    - Atomic I/O and YAML (fs)
    - Unified logging (logging_config)
    - Timing (profiler)

No module in utils/ may import from upper layers (sand, garden).

Convenience imports:
    from zen_garden.utils import fs, validators
    from zen_garden.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import geometry
from . import logging_config
from . import profiler
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    'fs',
    'geometry',
    'logging_config',
    'profiler',
    'validators',
    'setup_logging',
    'get_logger',
    'push_context',
]
