"""A pausable stopwatch for micro-benchmarks and allocation workloads to time."""

from __future__ import annotations

import random
import sys
import time
from typing import Any, Callable, TextIO

RUN_COUNT = 1000
"""How many times each benchmark is run."""

MAX_BENCHMARKS = 128
"""The most benchmarks one profiler will hold."""

Benchmark = Callable[["Profiler"], Any]

_random = random.Random()


class Profiler:
    """Times benchmarks, counting only the stretches between resume and pause.

    Elapsed time is kept in whole microseconds of the ``clock``, which must
    return nanoseconds. Each benchmark is called with the profiler so that it
    can pause the clock around work that should not be measured.
    """

    def __init__(self, run_count: int = RUN_COUNT, clock: Callable[[], int] = time.perf_counter_ns) -> None:
        if run_count <= 0:
            raise ValueError(f"run_count must be positive, got {run_count}")
        self.run_count = run_count
        self._clock = clock
        self._pause_point = clock()
        self.elapsed = 0.0
        self.paused = True
        self._benchmarks: dict[str, Benchmark] = {}

    @property
    def benchmarks(self) -> tuple[str, ...]:
        """Names of the registered benchmarks, in the order they were added."""
        return tuple(self._benchmarks)

    def start(self, duration: float = 0.0) -> None:
        """Start timing, counting up from ``duration`` microseconds."""
        self._pause_point = self._clock()
        self.elapsed = duration
        self.paused = False

    def pause(self) -> None:
        """Stop the clock and add the time since the last resume; does nothing if paused."""
        now = self._clock()
        if not self.paused:
            self.paused = True
            self.elapsed += now // 1000 - self._pause_point // 1000
            self._pause_point = self._clock()

    def resume(self) -> None:
        """Start the clock again."""
        self._pause_point = self._clock()
        self.paused = False

    def add_benchmark(self, name: str, func: Benchmark) -> None:
        """Register ``func`` under ``name``."""
        if name in self._benchmarks:
            raise ValueError(f"a benchmark named {name!r} is already registered")
        if len(self._benchmarks) >= MAX_BENCHMARKS:
            raise ValueError(f"cannot register more than {MAX_BENCHMARKS} benchmarks")
        self._benchmarks[name] = func

    def benchmark(self, name: str | None = None) -> Callable[[Benchmark], Benchmark]:
        """Decorator that registers a function, under ``name`` or its own name."""

        def register(func: Benchmark) -> Benchmark:
            self.add_benchmark(name if name is not None else func.__name__, func)
            return func

        return register

    def run_all_benchmarks(self, stream: TextIO | None = None) -> dict[str, float]:
        """Run every benchmark ``run_count`` times and report the average microseconds."""
        out = sys.stdout if stream is None else stream
        results: dict[str, float] = {}
        for name, func in self._benchmarks.items():
            total = 0.0
            for _ in range(self.run_count):
                self.start(0.0)
                func(self)
                self.pause()
                total += self.elapsed
            average = total / self.run_count
            results[name] = average
            out.write(f"{name}: {average:.3f} us\n")
        return results


def perform_allocation(profiler: Profiler, alloc: Any, count: int = 1) -> None:
    """Time ``count`` single-item allocations, then free them untimed."""
    profiler.pause()
    profiler.resume()
    ptrs = [alloc.allocate(1) for _ in range(count)]
    profiler.pause()
    for p in reversed(ptrs):
        alloc.deallocate(p, 1)


def perform_ordered_deallocation(profiler: Profiler, alloc: Any, count: int = 1) -> None:
    """Time freeing ``count`` single-item allocations in reverse order."""
    profiler.pause()
    ptrs = [alloc.allocate(1) for _ in range(count)]
    profiler.resume()
    for p in reversed(ptrs):
        alloc.deallocate(p, 1)
    profiler.pause()


def perform_unordered_allocation(profiler: Profiler, alloc: Any, count: int = 1) -> None:
    """Free a random half of ``count`` allocations, then time refilling them."""
    profiler.pause()
    ptrs = [alloc.allocate(1) for _ in range(count)]
    shuffled = list(ptrs)
    _random.shuffle(shuffled)
    half = count // 2
    for p in shuffled[:half]:
        alloc.deallocate(p, 1)
    profiler.resume()
    shuffled[:half] = [alloc.allocate(1) for _ in range(half)]
    profiler.pause()
    for p in shuffled:
        alloc.deallocate(p, 1)


def perform_unordered_deallocation(profiler: Profiler, alloc: Any, count: int = 1) -> None:
    """Time freeing ``count`` single-item allocations in random order."""
    profiler.pause()
    ptrs = [alloc.allocate(1) for _ in range(count)]
    _random.shuffle(ptrs)
    profiler.resume()
    for p in ptrs:
        alloc.deallocate(p, 1)
    profiler.pause()