# ktl

Composable memory allocators and allocator-aware containers. Memory lives in a
simulated address space (`ktl.memory.AddressSpace`). Pointers are plain
integers and `None` is the null pointer, so alignment, ownership and corruption
checks are exact and never touch real memory.

## Allocators

Untyped allocators count in bytes. Each provides `allocate(n)` and
`deallocate(p, n)`, and some also provide `owns(p)`, `max_size()`,
`construct(...)` and `destroy(p)`.

- `ktl.mallocator.Mallocator`: stateless. It takes 16-byte aligned blocks from the default address space.
- `ktl.null_allocator.NullAllocator`: always returns `None`. Use it to check that a branch of a composite allocator is never taken.
- `ktl.stack_allocator.StackAllocator`: hands out consecutive chunks of a fixed-size `Stack`. Only the top chunk can be reused. The stack resets once every chunk has been deallocated.
- `ktl.fallback.Fallback`: tries the primary allocator first and uses the fallback when the primary returns `None`. The primary must support `owns`.
- `ktl.overflow.Overflow`: puts 64 guard bytes on each side of every allocation. It writes a report to a text stream when:
  - a guard byte has been overwritten, checked on deallocation;
  - memory is still outstanding when `close()` is called, including on leaving a `with` block;
  - construct and destroy calls are unbalanced at that point.
- `ktl.debug.Debug`: appends an `AllocationRecord(file, line, size)` to a container for every allocation.
- `ktl.global_allocator.Global`: every wrapper made for the same allocator type shares one underlying allocator. `set_allocator` replaces that allocator.
- `ktl.type_allocator.TypeAllocator`: turns an untyped allocator into one that counts in items of a given size. It can also `construct` and `destroy` values, and `rebind` to another type.

## Containers and utilities

- `ktl.trivial_array.TrivialArray`: a fixed-size array whose storage comes from a `TypeAllocator`. It supports:
  - copying with `copy` and moving with `take`;
  - changing contents with `resize` and `assign`;
  - returning its storage with `release`, which also runs on leaving a `with` block.
- `ktl.packed_ptr.PackedPtr`: stores a small integer in the unused low bits of an aligned address.
- `ktl.ipair.ipair`: wraps an iterable so that iterating it yields `IPairValue(first=index, second=value)` pairs. Each pair unpacks like a tuple.
- `ktl.utility`: holds `align_to_architecture` and `log2`.
- `ktl.meta`: holds `SourceLocation` and the capability checks `has_owns`, `has_max_size`, `has_construct` and `has_destroy`.

## Example

```python
from ktl.mallocator import Mallocator
from ktl.type_allocator import TypeAllocator

alloc = TypeAllocator(float, Mallocator(), 8)
p = alloc.allocate(4)
alloc.construct(p, 4.2)
alloc.destroy(p)
alloc.deallocate(p, 4)
```

## Benchmarks

`ktl.profiler.Profiler` is a pausable stopwatch that counts whole microseconds.
The module also provides these allocation workloads:

- `perform_allocation`
- `perform_ordered_deallocation`
- `perform_unordered_allocation`
- `perform_unordered_deallocation`

`ktl.benchmarks.register_benchmarks` adds init, uninit, allocation and
deallocation benchmarks for three allocators: the mallocator, the stack
allocator and a plain typed heap allocator.

To run all of them and print each one's average time:

```
ktl-bench
ktl-bench --runs 100
```

Each benchmark runs 1000 times unless you give `--runs`.

## What is not included

The package does not include:

- linear, cascading, freelist, size-segregating, reference-counted or thread-safe allocators;
- growable vector or heap containers;
- a unit-test runner command.

Memory is always simulated; no allocator hands out real memory.

## Tests

```
pip install .[test]
pytest
```