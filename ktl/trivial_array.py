"""A fixed-size array whose storage comes from a typed allocator."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from .mallocator import Mallocator
from .type_allocator import TypeAllocator


class TrivialArray:
    """An array of plain values backed by one allocation of a typed allocator.

    The array holds exactly as many items as were allocated for it. Slots
    that have not been written read as ``None``. ``allocator`` defaults to a
    heap allocator of 8-byte items.
    """

    def __init__(
        self,
        values: Iterable[Any] | None = None,
        allocator: TypeAllocator | None = None,
        size: int | None = None,
        fill: Any = None,
    ) -> None:
        if values is not None and size is not None:
            raise TypeError("give either values or a size, not both")
        self.allocator = allocator if allocator is not None else TypeAllocator(object, Mallocator(), item_size=8)
        self._begin: int | None = None
        self._items: list[Any] = []
        if values is not None:
            items = list(values)
            self._begin = self._allocate(len(items))
            self._items = items
        elif size is not None:
            if size < 0:
                raise ValueError(f"size must not be negative, got {size}")
            self._begin = self._allocate(size)
            self._items = [fill] * size

    def _allocate(self, n: int) -> int:
        address = self.allocator.allocate(n)
        if address is None:
            raise MemoryError(f"could not allocate {n} items")
        return address

    def _free(self) -> None:
        if self._begin is not None:
            self.allocator.deallocate(self._begin, len(self._items))

    def __enter__(self) -> "TrivialArray":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"TrivialArray({self._items!r})"

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __reversed__(self) -> Iterator[Any]:
        return reversed(self._items)

    def __getitem__(self, index: int) -> Any:
        return self._items[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._items[index] = value

    def copy(self, allocator: TypeAllocator | None = None) -> "TrivialArray":
        """Return a copy with its own storage, from ``allocator`` or this array's allocator."""
        return TrivialArray(self._items, self.allocator if allocator is None else allocator)

    def take(self, allocator: TypeAllocator | None = None) -> "TrivialArray":
        """Move the contents into a new array, leaving this one empty.

        With a different allocator the items are copied into new storage and
        the old storage is freed; otherwise the storage itself is handed over.
        """
        if allocator is None or allocator == self.allocator:
            moved = TrivialArray(allocator=self.allocator if allocator is None else allocator)
            moved._begin, moved._items = self._begin, self._items
        else:
            moved = TrivialArray(allocator=allocator)
            if self._begin is not None:
                moved._begin = moved._allocate(len(self._items))
                moved._items = list(self._items)
                self._free()
        self._begin = None
        self._items = []
        return moved

    def resize(self, n: int) -> None:
        """Change the size to ``n``, keeping the leading items."""
        if n < 0:
            raise ValueError(f"size must not be negative, got {n}")
        if n == len(self._items) and self._begin is not None:
            return
        if n == len(self._items):
            return
        block = self._allocate(n)
        kept = self._items[:n]
        self._free()
        self._begin = block
        self._items = kept + [None] * (n - len(kept))

    def assign(self, values: Iterable[Any]) -> None:
        """Replace the contents with ``values``, reallocating if the size differs."""
        items = list(values)
        if len(items) != len(self._items) or self._begin is None:
            block = self._allocate(len(items))
            self._free()
            self._begin = block
        self._items = items

    def empty(self) -> bool:
        """Whether the array has no items."""
        return not self._items

    def data(self) -> int | None:
        """The address of the array's storage, or ``None`` if it has none."""
        return self._begin

    def at(self, index: int) -> Any:
        """The item at ``index``."""
        return self._items[index]

    def release(self) -> None:
        """Give the storage back to the allocator and leave the array empty."""
        self._free()
        self._begin = None
        self._items = []