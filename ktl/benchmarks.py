"""Allocator benchmarks and the command that runs them."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .mallocator import Mallocator
from .memory import aligned_free, aligned_malloc
from .profiler import (
    RUN_COUNT,
    Profiler,
    perform_allocation,
    perform_ordered_deallocation,
    perform_unordered_deallocation,
)
from .stack_allocator import Stack, StackAllocator
from .type_allocator import TypeAllocator
from .utility import ALIGNMENT

_COUNT = 1000
_TRIVIAL_SIZE = 8
_INIT_STACK_SIZE = 16384


@dataclass
class _Trivial:
    x: float = 0.0
    y: float = 0.0


class _StdAllocator:
    """A typed heap allocator with no state of its own."""

    value_type = _Trivial
    item_size = _TRIVIAL_SIZE

    def allocate(self, n: int) -> int:
        return aligned_malloc(n * self.item_size, ALIGNMENT)

    def deallocate(self, p: int | None, n: int) -> None:
        aligned_free(p)


def _mallocator() -> TypeAllocator:
    return TypeAllocator(_Trivial, Mallocator(), _TRIVIAL_SIZE)


Workload = Callable[[Profiler, Any, int], None]

_WORKLOADS: tuple[tuple[str, Workload], ...] = (
    ("allocate_trivial", perform_allocation),
    ("deallocate_ordered_trivial", perform_ordered_deallocation),
    ("deallocate_unordered_trivial", perform_unordered_deallocation),
)


def _register_mallocator(profiler: Profiler) -> None:
    def init(p: Profiler) -> None:
        _mallocator()
        p.pause()

    def uninit(p: Profiler) -> None:
        p.pause()
        alloc = _mallocator()
        p.resume()
        del alloc

    profiler.add_benchmark("mallocator_init", init)
    profiler.add_benchmark("mallocator_uninit", uninit)
    for suffix, workload in _WORKLOADS:
        def run(p: Profiler, workload: Workload = workload) -> None:
            p.pause()
            workload(p, _mallocator(), _COUNT)

        profiler.add_benchmark(f"mallocator_{suffix}", run)


def _register_stack_allocator(profiler: Profiler) -> None:
    def init(p: Profiler) -> None:
        block = Stack(_INIT_STACK_SIZE)
        TypeAllocator(_Trivial, StackAllocator(block), _TRIVIAL_SIZE)
        p.pause()

    def uninit(p: Profiler) -> None:
        p.pause()
        block = Stack(_INIT_STACK_SIZE)
        alloc = TypeAllocator(_Trivial, StackAllocator(block), _TRIVIAL_SIZE)
        del alloc, block
        p.resume()

    profiler.add_benchmark("stack_allocator_init", init)
    profiler.add_benchmark("stack_allocator_uninit", uninit)
    for suffix, workload in _WORKLOADS:
        def run(p: Profiler, workload: Workload = workload) -> None:
            p.pause()
            block = Stack(_TRIVIAL_SIZE * _COUNT)
            alloc = TypeAllocator(_Trivial, StackAllocator(block), _TRIVIAL_SIZE)
            workload(p, alloc, _COUNT)

        profiler.add_benchmark(f"stack_allocator_{suffix}", run)


def _register_std_allocator(profiler: Profiler) -> None:
    def init(p: Profiler) -> None:
        _StdAllocator()
        p.pause()

    def uninit(p: Profiler) -> None:
        p.pause()
        alloc = _StdAllocator()
        p.resume()
        del alloc

    profiler.add_benchmark("std_allocator_init", init)
    profiler.add_benchmark("std_allocator_uninit", uninit)
    for suffix, workload in _WORKLOADS:
        def run(p: Profiler, workload: Workload = workload) -> None:
            p.pause()
            workload(p, _StdAllocator(), _COUNT)

        profiler.add_benchmark(f"std_allocator_{suffix}", run)


def register_benchmarks(profiler: Profiler) -> None:
    """Add every allocator benchmark to ``profiler``."""
    _register_mallocator(profiler)
    _register_stack_allocator(profiler)
    _register_std_allocator(profiler)


def main(argv: Sequence[str] | None = None) -> int:
    """Run all allocator benchmarks and print their average times."""
    parser = argparse.ArgumentParser(prog="ktl-benchmarks", description="Benchmark the allocators.")
    parser.add_argument("--runs", type=int, default=RUN_COUNT, help="runs per benchmark (default: %(default)s)")
    args = parser.parse_args(argv)
    if args.runs <= 0:
        parser.error("--runs must be positive")
    profiler = Profiler(run_count=args.runs)
    register_benchmarks(profiler)
    profiler.run_all_benchmarks(sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())