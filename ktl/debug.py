"""An allocator wrapper that records where every allocation came from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from . import meta
from .type_allocator import _Wrapper


@dataclass(frozen=True)
class AllocationRecord:
    """One allocation: the file and line that asked for it and its size in bytes."""

    file: str
    line: int
    size: int


class Debug(_Wrapper):
    """Appends an :class:`AllocationRecord` to ``container`` for every allocation."""

    def __init__(self, container: Any, allocator: Any) -> None:
        super().__init__(allocator)
        self.container = container

    def __repr__(self) -> str:
        return f"Debug({self.allocator!r})"

    def allocate(self, n: int, source: meta.SourceLocation | None = None) -> Any:
        """Record the request and allocate ``n`` bytes from the wrapped allocator."""
        if source is None:
            source = meta.SourceLocation.current(1)
        self.container.append(AllocationRecord(source.file_name, source.line, n))
        return meta.allocate(self.allocator, n, source)

    def deallocate(self, p: Any, n: int) -> None:
        """Give ``n`` bytes at ``p`` back to the wrapped allocator."""
        self.allocator.deallocate(p, n)

    def construct(self, p: Any, *args: Any) -> None:
        """Let the wrapped allocator construct an object at ``p``."""
        self._forward("construct")(p, *args)

    def destroy(self, p: Any) -> None:
        """Let the wrapped allocator destroy the object at ``p``."""
        self._forward("destroy")(p)

    def max_size(self) -> int:
        """The wrapped allocator's maximum allocation size."""
        return super().max_size()

    def owns(self, p: Any) -> bool:
        """Whether the wrapped allocator owns ``p``."""
        return super().owns(p)