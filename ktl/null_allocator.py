"""An allocator that never hands out memory."""

from __future__ import annotations


class _Stateless:
    """Base for allocators without state: every instance equals every other."""

    def __eq__(self, other: object) -> bool:
        if type(other) is type(self):
            return True
        return NotImplemented

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NullAllocator(_Stateless):
    """Always fails to allocate.

    Useful for making sure a branch of a composite allocator is never taken.
    """

    def allocate(self, n: int) -> None:
        """Refuse every request by returning the null pointer."""
        if n < 0:
            raise ValueError(f"allocation size must not be negative, got {n}")
        return None

    def deallocate(self, p: int | None, n: int) -> None:
        """Accept only the null pointer."""
        if p is not None:
            raise ValueError(f"NullAllocator cannot free {p!r}; it never allocates")

    def owns(self, p: int | None) -> bool:
        """Own exactly the null pointer."""
        return p is None