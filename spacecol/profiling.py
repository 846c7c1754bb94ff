"""
Lightweight phase timing for the growth loop.

Disabled by default; call ``profiler.enable()`` before a run and
``profiler.print_stats()`` afterwards.
"""

import time
from functools import wraps
from collections import defaultdict
from typing import Dict


class PhaseStats:
    __slots__ = ('calls', 'total_time', 'max_time')

    def __init__(self):
        self.calls = 0
        self.total_time = 0.0
        self.max_time = 0.0

    @property
    def avg_ms(self) -> float:
        return self.total_time / self.calls * 1000 if self.calls else 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            'calls': self.calls,
            'total_time': self.total_time,
            'max_time': self.max_time,
            'avg_ms': self.avg_ms,
        }


class Profiler:
    def __init__(self):
        self.phases: Dict[str, PhaseStats] = defaultdict(PhaseStats)
        self.enabled = False

    def enable(self):
        self.enabled = True

    def disable(self):
        self.enabled = False

    def record(self, name: str, elapsed: float):
        if not self.enabled:
            return
        stats = self.phases[name]
        stats.calls += 1
        stats.total_time += elapsed
        stats.max_time = max(stats.max_time, elapsed)

    def summary(self) -> Dict[str, Dict[str, float]]:
        """Per-phase timings keyed by qualified function name."""
        return {name: stats.as_dict() for name, stats in self.phases.items()}

    def print_stats(self):
        if not self.phases:
            return

        print("\n" + "=" * 70)
        print("GROWTH PHASE TIMINGS")
        print("=" * 70)
        print(f"{'Phase':<40} {'Calls':>8} {'Total(s)':>10} {'Avg(ms)':>10}")
        print("-" * 70)

        ordered = sorted(self.phases.items(), key=lambda item: item[1].total_time, reverse=True)
        for name, stats in ordered:
            print(f"{name:<40} {stats.calls:>8} {stats.total_time:>10.3f} {stats.avg_ms:>10.3f}")

        print("=" * 70)

    def reset(self):
        self.phases.clear()


profiler = Profiler()


def profile(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not profiler.enabled:
            return func(*args, **kwargs)
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            profiler.record(func.__qualname__, time.perf_counter() - start)
    return wrapper
