"""
Runtime measurement for the game driver: total wall time and per-move think time.
"""

import time
from typing import List, Optional


def format_runtime(seconds: float) -> str:
    """Render seconds as e.g. ``1h 02m 03.50s``, ``2m 05.00s`` or ``4.25s``."""
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:05.2f}s"
    if minutes:
        return f"{minutes}m {secs:05.2f}s"
    return f"{secs:.2f}s"


class Timer:
    """Context manager timing a block; ``laps`` collects per-move durations.

    With a description the total runtime is printed when the block exits.
    """

    def __init__(self, description: Optional[str] = None):
        self.description = description
        self.start_time = None
        self.end_time = None
        self.laps: List[float] = []
        self._lap_start = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self._lap_start = self.start_time
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        if self.description:
            print(f"{self.description}: {format_runtime(self.end_time - self.start_time)}")

    def lap(self) -> float:
        """Close the current lap and start a new one; returns the lap length."""
        now = time.perf_counter()
        duration = now - self._lap_start
        self.laps.append(duration)
        self._lap_start = now
        return duration

    def elapsed(self) -> float:
        """Elapsed time in seconds (final once the block has exited)"""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    def mean_lap(self) -> float:
        return sum(self.laps) / len(self.laps) if self.laps else 0.0
