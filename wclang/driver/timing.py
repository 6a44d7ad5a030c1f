"""
Timing accumulator for verbose runs.
"""

import time
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class TimingLog:
    """
    Named time points relative to the start of the run.

    Example:
        >>> timing = TimingLog()
        >>> timing.mark("start")
        >>> timing.report()
        ['start +0.001 ms']
    """

    start: float = field(default_factory=time.perf_counter)
    points: List[Tuple[str, float]] = field(default_factory=list)

    def mark(self, description: str) -> None:
        self.points.append((description, time.perf_counter()))

    def report(self) -> List[str]:
        """One ``"<description> +<ms> ms"`` line per point."""
        lines = []
        for description, stamp in self.points:
            elapsed_ms = (stamp - self.start) * 1000.0
            lines.append(f"{description} +{elapsed_ms:.3f} ms")
        return lines


__all__ = ["TimingLog"]
