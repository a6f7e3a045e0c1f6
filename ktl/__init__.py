"""Composable memory allocators, allocator-aware containers and allocation benchmarks."""

__version__ = "0.1.0"

__all__ = [
    "utility",
    "memory",
    "meta",
    "mallocator",
    "null_allocator",
    "stack_allocator",
    "type_allocator",
    "fallback",
    "overflow",
    "debug",
    "global_allocator",
    "packed_ptr",
    "trivial_array",
    "ipair",
    "profiler",
    "benchmarks",
]