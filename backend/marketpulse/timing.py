"""
Timing Utilities for Latency Instrumentation

Logs execution times of the steps in the competitor analysis pipeline.
"""

import time
from contextlib import asynccontextmanager, contextmanager
from typing import Optional


def log_timing(node_name: str, action: str, duration_ms: Optional[float] = None):
    """Log a timing event in standard format."""
    if duration_ms is not None:
        print(f"[TIMING] {node_name}: {action} — duration={duration_ms:.0f}ms")
    else:
        print(f"[TIMING] {node_name}: {action}")


class StepTimer:
    """
    Utility class for timing multiple steps within one request.

    Usage:
        timer = StepTimer("market_analysis")
        async with timer.async_step("search"):
            await search()
        with timer.step("context"):
            build()
        timer.summary()
    """

    def __init__(self, node_name: str):
        self.node_name = node_name
        self.steps: dict[str, float] = {}
        self.start_time = time.perf_counter()

    def _record(self, step_name: str, start: float):
        duration_ms = (time.perf_counter() - start) * 1000
        self.steps[step_name] = duration_ms
        log_timing(self.node_name, step_name, duration_ms)

    @contextmanager
    def step(self, step_name: str):
        """Time a single step."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._record(step_name, start)

    @asynccontextmanager
    async def async_step(self, step_name: str):
        """Time a single async step."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._record(step_name, start)

    def summary(self):
        """Log summary of all steps."""
        total_ms = (time.perf_counter() - self.start_time) * 1000
        log_timing(self.node_name, "TOTAL", total_ms)
        return total_ms
