"""Lightweight wall-clock timing for rake replays.

Provides:
    - timer(): context manager reporting elapsed seconds to a sink or the log
    - TimerAccumulator: running total/mean over many measurements
      (e.g. per pointer-move stroke cost during a replayed drag)
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Time the enclosed block.

    Parameters
    ----------
    name : str
        Label for the measurement
    sink : Optional[Callable[[str, float], None]]
        Callback(name, elapsed_seconds); if None the timing is logged at DEBUG

    Examples
    --------
    >>> with timer("replay", sink=lambda n, t: print(n, t)):
    ...     controller.pointer_move(40.0, 12.0)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if sink is not None:
            sink(name, elapsed)
        else:
            logger.debug(f"{name}: {elapsed:.6f} s")


class TimerAccumulator:
    """Accumulate timing measurements for averaging.

    Examples
    --------
    >>> stroke_timer = TimerAccumulator("stroke")
    >>> for x, y in path:
    ...     with stroke_timer.measure():
    ...         controller.pointer_move(x, y)
    >>> stroke_timer.mean()
    """

    def __init__(self, name: str):
        self.name = name
        self.total_time = 0.0
        self.count = 0

    @contextmanager
    def measure(self):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.total_time += time.perf_counter() - start
            self.count += 1

    def mean(self) -> float:
        """Mean seconds per measurement (0.0 before the first one)."""
        return self.total_time / self.count if self.count > 0 else 0.0

    def reset(self) -> None:
        self.total_time = 0.0
        self.count = 0
