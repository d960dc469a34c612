"""Timing bookkeeping for playback ticks."""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class TimeState:
    """Tracks intervals between playback ticks"""

    start_time: float = field(default_factory=time.perf_counter)
    last_update: Optional[float] = None
    tick_count: int = 0
    elapsed_ms: float = 0.0

    # Last intervals in milliseconds
    intervals: List[float] = field(default_factory=list)
    max_intervals: int = 60

    def reset(self) -> None:
        """Reset time state"""
        self.start_time = time.perf_counter()
        self.last_update = None
        self.tick_count = 0
        self.elapsed_ms = 0.0
        self.intervals.clear()

    def update(self, current_time: Optional[float] = None) -> None:
        """Record a tick"""
        if current_time is None:
            current_time = time.perf_counter()

        previous = self.last_update if self.last_update is not None else self.start_time
        self.intervals.append((current_time - previous) * 1000)
        if len(self.intervals) > self.max_intervals:
            self.intervals.pop(0)

        self.last_update = current_time
        self.elapsed_ms = (current_time - self.start_time) * 1000
        self.tick_count += 1

    def get_metrics(self) -> Dict[str, float]:
        """Get timing metrics"""
        if not self.intervals:
            return {
                "avg_interval_ms": 0,
                "min_interval_ms": 0,
                "max_interval_ms": 0,
                "elapsed_ms": self.elapsed_ms,
                "tick_count": self.tick_count,
            }

        return {
            "avg_interval_ms": sum(self.intervals) / len(self.intervals),
            "min_interval_ms": min(self.intervals),
            "max_interval_ms": max(self.intervals),
            "elapsed_ms": self.elapsed_ms,
            "tick_count": self.tick_count,
        }
