"""An allocator wrapper that detects buffer overruns, leaks and mismatched constructions."""

from __future__ import annotations

from typing import Any, TextIO

from . import meta
from .memory import default_space

OVERFLOW_TEST = 0b10100101
"""The byte written into the guard areas around every allocation."""

OVERFLOW_SIZE = 64
"""Size in bytes of the guard area on each side of an allocation."""


class Overflow:
    """Surrounds every allocation with guard bytes and reports problems to ``stream``.

    Corruption of the guard bytes is reported on deallocation; outstanding
    memory and unbalanced construct/destroy calls are reported by
    :meth:`close`, which also runs when the allocator is used as a context
    manager.
    """

    def __init__(self, stream: TextIO, allocator: Any) -> None:
        if hasattr(allocator, "value_type"):
            raise TypeError("building on top of typed allocators is not allowed; use an untyped allocator")
        self.stream = stream
        self.allocator = allocator
        self.allocated = 0
        self.constructed = 0
        self._closed = False

    def __enter__(self) -> "Overflow":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Overflow):
            return self.allocator == other.allocator
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Overflow({self.allocator!r}, allocated={self.allocated}, constructed={self.constructed})"

    def _supports(self, name: str) -> bool:
        if name == "owns":
            return meta.has_owns(self.allocator)
        if name == "max_size":
            return meta.has_max_size(self.allocator)
        return True

    def allocate(self, n: int, source: meta.SourceLocation | None = None) -> int | None:
        """Allocate ``n`` bytes with a guard area on either side."""
        if source is None:
            source = meta.SourceLocation.current(1)
        self.allocated += n
        ptr = meta.allocate(self.allocator, n + OVERFLOW_SIZE * 2, source)
        if ptr is None:
            return None
        space = default_space()
        space.fill(ptr, OVERFLOW_TEST, OVERFLOW_SIZE)
        space.fill(ptr + OVERFLOW_SIZE + n, OVERFLOW_TEST, OVERFLOW_SIZE)
        return ptr + OVERFLOW_SIZE

    def deallocate(self, p: int | None, n: int) -> None:
        """Check the guard areas around ``p`` and give the memory back."""
        if p is None:
            raise ValueError("cannot deallocate the null pointer")
        self.allocated -= n
        space = default_space()
        guard_before = space.read(p - OVERFLOW_SIZE, OVERFLOW_SIZE)
        guard_after = space.read(p + n, OVERFLOW_SIZE)

        before = max(
            (OVERFLOW_SIZE - k for k, byte in enumerate(guard_before) if byte != OVERFLOW_TEST),
            default=0,
        )
        after = max(
            (k + 1 for k, byte in enumerate(guard_after) if byte != OVERFLOW_TEST),
            default=0,
        )

        if before or after:
            self.stream.write(
                "--------MEMORY CORRUPTION DETECTED--------\n"
                f"The area around {p:#x} ({n} bytes) has been illegally modified\n"
            )
            if before:
                self.stream.write(f" Before ({before} bytes)\n")
            if after:
                self.stream.write(f" After ({after} bytes)\n")

        self.allocator.deallocate(p - OVERFLOW_SIZE, n + OVERFLOW_SIZE * 2)

    def construct(self, p: int, *args: Any) -> None:
        """Build ``factory(*rest)`` at ``p`` and count the construction."""
        if not args:
            raise TypeError("construct needs a factory to build the object with")
        self.constructed += 1
        if meta.has_construct(self.allocator):
            self.allocator.construct(p, *args)
        else:
            factory, *rest = args
            default_space().store(p, factory(*rest))

    def destroy(self, p: int) -> None:
        """Destroy the object at ``p`` and count the destruction."""
        self.constructed -= 1
        if meta.has_destroy(self.allocator):
            self.allocator.destroy(p)
        else:
            default_space().discard(p)

    def max_size(self) -> int:
        """The wrapped allocator's maximum allocation size."""
        if not meta.has_max_size(self.allocator):
            raise TypeError(f"{type(self.allocator).__name__} has no max_size")
        return self.allocator.max_size()

    def owns(self, p: int | None) -> bool:
        """Whether the wrapped allocator owns ``p``."""
        if not meta.has_owns(self.allocator):
            raise TypeError(f"{type(self.allocator).__name__} has no owns")
        return self.allocator.owns(p)

    def close(self) -> None:
        """Report leaked memory and unbalanced constructions; only the first call reports."""
        if self._closed:
            return
        self._closed = True

        if self.allocated != 0:
            self.stream.write("--------MEMORY LEAK DETECTED--------\nAllocator destroyed while having:\n")
            if self.allocated > 0:
                self.stream.write(f" Allocated memory ({self.allocated} bytes)\n")
            else:
                self.stream.write(f" Too many frees ({-self.allocated} bytes)\n")

        if self.constructed != 0:
            self.stream.write("--------POSSIBLE LOGIC ERROR DETECTED--------\nAllocator destroyed while having:\n")
            if self.constructed > 0:
                self.stream.write(f" Too many constructor calls ({self.constructed})\n")
            else:
                self.stream.write(f" Too many destructor calls ({-self.constructed})\n")