"""
Profiling utilities for the `bench` command.

Measures wall-clock time (perf_counter), peak RSS and CPU usage (psutil) of a
block of code:

    with profile_block("view", iterations=10_000) as stats:
        for _ in range(10_000):
            view.model_dump_json()

    print(stats.duration_seconds, stats.ops_per_sec, stats.peak_rss_bytes)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    iterations: int = field(default=1)
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def ops_per_sec(self) -> float:
        return self.iterations / self.duration_seconds if self.duration_seconds > 0 else 0.0

    @property
    def usec_per_op(self) -> float:
        return self.duration_seconds * 1_000_000 / self.iterations if self.iterations else 0.0


@contextlib.contextmanager
def profile_block(label: str, iterations: int = 1) -> Generator[ProfileStats, None, None]:
    """
    Context manager profiling a block of code.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.
    iterations : int
        Number of operations the block performs, used for per-op figures.

    Notes
    -----
    Peak RSS is the larger of the start and end samples, which is accurate
    enough for the short, allocation-light loops the benchmark runs.
    """
    stats = ProfileStats(label=label, iterations=iterations)
    process = psutil.Process()
    process.cpu_percent(interval=None)  # priming call
    rss_before = process.memory_info().rss

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts
        stats.peak_rss_bytes = max(rss_before, process.memory_info().rss)
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
