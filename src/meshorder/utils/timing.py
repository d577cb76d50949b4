"""
Timing utilities for optimization runs.

Provides:
- Context manager for timing pipeline stages
- Accumulated timing log
- Progress tracking for long reordering passes
"""

from __future__ import annotations

import time
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger("meshorder.timing")


@dataclass
class TimingResult:
    """Result of a timed operation."""
    operation: str
    elapsed_seconds: float
    success: bool
    error: Optional[str] = None

    def __str__(self) -> str:
        status = "OK" if self.success else "ERROR"
        return f"{self.operation}: {self.elapsed_seconds:.3f}s [{status}]"


@dataclass
class TimingLog:
    """Accumulated timing information for a pipeline run."""
    entries: list[TimingResult] = field(default_factory=list)

    def add(self, result: TimingResult):
        """Add a timing result."""
        self.entries.append(result)
        logger.info(str(result))

    def total_time(self) -> float:
        """Sum of recorded stage times."""
        return sum(entry.elapsed_seconds for entry in self.entries)

    def summary(self) -> str:
        """Generate summary of all timings."""
        lines = ["Timing Summary:", "-" * 40]
        for entry in self.entries:
            lines.append(f"  {entry}")
        lines.append("-" * 40)
        lines.append(f"  Total: {self.total_time():.3f}s")
        return "\n".join(lines)


@contextmanager
def timed_operation(name: str, timing_log: Optional[TimingLog] = None):
    """
    Context manager for timing an operation.

    Args:
        name: Name of the operation for logging
        timing_log: Log to record the result in (None = don't record)

    Yields:
        TimingResult that will be populated on exit
    """
    result = TimingResult(operation=name, elapsed_seconds=0, success=False)
    start = time.perf_counter()

    try:
        yield result
        result.success = True
    except Exception as e:
        result.error = str(e)
        raise
    finally:
        result.elapsed_seconds = time.perf_counter() - start
        if timing_log is not None:
            timing_log.add(result)


class ProgressTimer:
    """
    Rate-limited progress reporting for a pass over a known number of items.

    advance() is called once per item in the hot loop, so the clock is only
    read every check_every items. A progress line is logged at most once
    per log_interval seconds; intervals <= 0 disable progress lines.
    """

    def __init__(self, total: int, label: str = "Processing",
                 log_interval: float = 5.0, check_every: int = 256):
        self.total = total
        self.label = label
        self.log_interval = log_interval
        self.check_every = max(1, check_every)
        self.done = 0
        self._started = time.perf_counter()
        self._next_report = self._started + log_interval

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self._started

    @property
    def fraction(self) -> float:
        return self.done / self.total if self.total else 1.0

    def advance(self, n: int = 1):
        """Record n more finished items."""
        self.done += n
        if self.log_interval <= 0 or self.done % self.check_every:
            return

        now = time.perf_counter()
        if now >= self._next_report:
            self._report(now - self._started)
            self._next_report = now + self.log_interval

    def _report(self, elapsed: float):
        eta = elapsed * (self.total - self.done) / self.done if self.done else 0.0
        logger.info(f"{self.label}: {self.done}/{self.total} ({self.fraction:.0%}), "
                    f"{elapsed:.1f}s elapsed, ~{eta:.1f}s left")

    def finish(self) -> float:
        """Return seconds since construction, logging the throughput."""
        elapsed = self.elapsed
        rate = self.done / elapsed if elapsed > 0 else float("inf")
        logger.debug(f"{self.label}: {self.done} items in {elapsed:.3f}s ({rate:.0f}/s)")
        return elapsed
