"""A bump allocator that carves chunks out of a fixed-size stack block."""

from __future__ import annotations

import weakref

from .memory import AddressSpace, default_space
from .utility import ALIGNMENT, align_to_architecture


class Stack:
    """A block of ``size`` aligned bytes with a bump pointer."""

    def __init__(self, size: int, space: AddressSpace | None = None) -> None:
        if size <= 0:
            raise ValueError(f"stack size must be positive, got {size}")
        self.size = size
        self.space = default_space() if space is None else space
        self.data = self.space.allocate(size, ALIGNMENT)
        self.free = self.data
        self.object_count = 0
        weakref.finalize(self, self.space.free, self.data)

    def __repr__(self) -> str:
        return f"Stack(size={self.size}, used={self.free - self.data})"


class StackAllocator:
    """Hands out consecutive chunks of a :class:`Stack`.

    Only the most recent chunk can be given back for reuse; the whole stack
    is reset once every chunk has been deallocated.
    """

    def __init__(self, block: Stack) -> None:
        self.block = block

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StackAllocator):
            return self.block is other.block
        return NotImplemented

    def __hash__(self) -> int:
        return id(self.block)

    def __repr__(self) -> str:
        return f"StackAllocator({self.block!r})"

    def allocate(self, n: int) -> int | None:
        """Return the address of ``n`` bytes, or ``None`` if the stack is full."""
        block = self.block
        total = n + align_to_architecture(n)
        if block.free - block.data + total > block.size:
            return None
        current = block.free
        block.free += total
        block.object_count += total
        return current

    def deallocate(self, p: int | None, n: int) -> None:
        """Give back ``n`` bytes at ``p``; memory is reused only if ``p`` is the top chunk."""
        block = self.block
        total = n + align_to_architecture(n)
        if block.free - total == p:
            block.free -= total
        block.object_count -= total
        # Assumes the same memory is never deallocated twice.
        if block.object_count == 0:
            block.free = block.data

    def max_size(self) -> int:
        """The largest allocation the stack could ever satisfy."""
        return self.block.size

    def owns(self, p: int | None) -> bool:
        """Whether ``p`` lies inside the stack's memory."""
        if p is None:
            return False
        low = self.block.data
        return low <= p < low + self.block.size