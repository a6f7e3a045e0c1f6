"""An untyped allocator backed by the aligned heap."""

from __future__ import annotations

from .memory import aligned_free, aligned_malloc
from .null_allocator import _Stateless
from .utility import ALIGNMENT


class Mallocator(_Stateless):
    """Allocates from the aligned heap.

    It holds no state, so any instance can free memory from any other.
    """

    def allocate(self, n: int) -> int:
        """Return the address of ``n`` fresh bytes."""
        return aligned_malloc(n, ALIGNMENT)

    def deallocate(self, p: int | None, n: int) -> None:
        """Release memory previously returned by :meth:`allocate`."""
        aligned_free(p)