"""
Opt-in timing of the parser, generator and path engines.

Set ``PATHJSON_PROFILE`` in the environment before import to record how often
each hot entry point ran, for how long and over how many units of work
(characters for text, tokens for paths). Otherwise ``ProfileContext`` is an
empty context manager.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

PROFILE_HOT_PATHS = __debug__ and "PATHJSON_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Accumulated timings of one profiled entry point."""

    operation: str
    call_count: int = 0
    total_time_ns: int = 0
    units_processed: int = 0

    def record_call(self, duration_ns: int, units: int = 0) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.units_processed += units

    @property
    def mean_time_ns(self) -> float:
        return self.total_time_ns / self.call_count if self.call_count else 0.0


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Times the enclosed block under ``operation``."""

        def __init__(self, operation: str, units: int = 0):
            self.operation = operation
            self.units = units
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            stats = _hot_path_stats.setdefault(
                self.operation, HotPathStats(self.operation)
            )
            stats.record_call(duration, self.units)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns a snapshot of the statistics recorded so far."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, operation: str, units: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


def log_hot_path_stats() -> None:
    """Writes one DEBUG line per profiled operation, slowest first."""
    stats = sorted(
        get_hot_path_stats().values(),
        key=lambda s: s.total_time_ns,
        reverse=True,
    )
    for entry in stats:
        logger.debug(
            "%s: %d calls, %.1f us mean, %d units",
            entry.operation,
            entry.call_count,
            entry.mean_time_ns / 1000,
            entry.units_processed,
        )
