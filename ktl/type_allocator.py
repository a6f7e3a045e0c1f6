"""A wrapper that turns an untyped allocator into a typed one."""

from __future__ import annotations

from typing import Any, Callable

from . import meta
from .memory import default_space

_ITEM_SIZES: dict[type, int] = {float: 8, int: 8, complex: 16, bool: 1}

_CAPABILITIES: dict[str, Callable[[Any], bool]] = {
    "owns": meta.has_owns,
    "max_size": meta.has_max_size,
    "construct": meta.has_construct,
    "destroy": meta.has_destroy,
}


def _require_untyped(*allocators: Any) -> None:
    for alloc in allocators:
        if hasattr(alloc, "value_type"):
            raise TypeError("building on top of typed allocators is not allowed; use an untyped allocator")


class _Wrapper:
    """Base for allocators that wrap one untyped allocator."""

    _delegated: frozenset[str] = frozenset(_CAPABILITIES)

    def __init__(self, allocator: Any) -> None:
        _require_untyped(allocator)
        self.allocator = allocator

    def __eq__(self, other: object) -> bool:
        if isinstance(other, type(self)):
            return self.allocator == other.allocator
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def _supports(self, name: str) -> bool:
        return name not in self._delegated or _CAPABILITIES[name](self.allocator)

    def _forward(self, name: str) -> Callable[..., Any]:
        if not self._supports(name):
            raise TypeError(f"{type(self.allocator).__name__} has no {name}")
        return getattr(self.allocator, name)

    def owns(self, p: Any) -> bool:
        """Whether the wrapped allocator owns ``p``."""
        return self._forward("owns")(p)

    def max_size(self) -> int:
        """The wrapped allocator's maximum allocation size."""
        return self._forward("max_size")()


class TypeAllocator(_Wrapper):
    """Allocates whole items of ``value_type`` from an untyped allocator.

    Counts passed to :meth:`allocate` and :meth:`deallocate` are numbers of
    items, each ``item_size`` bytes large. Objects are constructed in the
    default address space unless the wrapped allocator constructs them.
    """

    _delegated = frozenset({"owns", "max_size"})

    def __init__(self, value_type: Any, allocator: Any, item_size: int | None = None) -> None:
        super().__init__(allocator)
        size = item_size if item_size is not None else _ITEM_SIZES.get(value_type)
        if size is None:
            raise TypeError(f"item_size is required for {value_type!r}")
        if size <= 0:
            raise ValueError(f"item_size must be positive, got {size}")
        self.value_type = value_type
        self.item_size = size

    def __repr__(self) -> str:
        name = getattr(self.value_type, "__name__", repr(self.value_type))
        return f"TypeAllocator({name}, {self.allocator!r}, item_size={self.item_size})"

    def allocate(self, n: int, source: meta.SourceLocation | None = None) -> int | None:
        """Return the address of room for ``n`` items, or ``None`` on failure."""
        if source is None:
            source = meta.SourceLocation.current(1)
        return meta.allocate(self.allocator, self.item_size * n, source)

    def deallocate(self, p: int | None, n: int) -> None:
        """Give back room for ``n`` items at ``p``."""
        self.allocator.deallocate(p, self.item_size * n)

    def construct(self, p: int, *args: Any) -> None:
        """Build ``value_type(*args)`` at ``p``."""
        if meta.has_construct(self.allocator):
            self.allocator.construct(p, self.value_type, *args)
        else:
            default_space().store(p, self.value_type(*args))

    def destroy(self, p: int) -> None:
        """Destroy the item at ``p``."""
        if meta.has_destroy(self.allocator):
            self.allocator.destroy(p)
        else:
            default_space().discard(p)

    def max_size(self) -> int:
        """The largest number of items one allocation may hold."""
        return super().max_size() // self.item_size

    def owns(self, p: Any) -> bool:
        """Whether the wrapped allocator owns ``p``."""
        return super().owns(p)

    def rebind(self, value_type: Any, item_size: int | None = None) -> "TypeAllocator":
        """Return an allocator for another type that shares this one's allocator."""
        return TypeAllocator(value_type, self.allocator, item_size)