"""An allocator wrapper whose underlying allocator is shared process-wide."""

from __future__ import annotations

import threading
from typing import Any, Callable, ClassVar

from . import meta


class Global:
    """Forwards every call to one allocator shared by all wrappers of the same type.

    ``allocator_type`` is any callable that builds an untyped allocator with
    no arguments, usually the allocator class itself. It is called once, the
    first time a wrapper for it is made. Every later wrapper for the same
    ``allocator_type`` uses that same instance.
    """

    _instances: ClassVar[dict[Any, Any]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, allocator_type: Callable[[], Any]) -> None:
        self.allocator_type = allocator_type
        with Global._lock:
            if allocator_type not in Global._instances:
                instance = allocator_type()
                _check_untyped(instance)
                Global._instances[allocator_type] = instance

    @property
    def allocator(self) -> Any:
        """The shared underlying allocator."""
        return Global._instances[self.allocator_type]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Global):
            return self.allocator_type == other.allocator_type
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Global, self.allocator_type))

    def __repr__(self) -> str:
        name = getattr(self.allocator_type, "__name__", repr(self.allocator_type))
        return f"Global({name})"

    def _supports(self, name: str) -> bool:
        if name == "owns":
            return meta.has_owns(self.allocator)
        if name == "max_size":
            return meta.has_max_size(self.allocator)
        if name == "construct":
            return meta.has_construct(self.allocator)
        if name == "destroy":
            return meta.has_destroy(self.allocator)
        return True

    def allocate(self, n: int, source: meta.SourceLocation | None = None) -> Any:
        """Allocate ``n`` bytes from the shared allocator."""
        if source is None:
            source = meta.SourceLocation.current(1)
        return meta.allocate(self.allocator, n, source)

    def deallocate(self, p: Any, n: int) -> None:
        """Give ``n`` bytes at ``p`` back to the shared allocator."""
        self.allocator.deallocate(p, n)

    def construct(self, p: Any, *args: Any) -> None:
        """Let the shared allocator construct an object at ``p``."""
        if not meta.has_construct(self.allocator):
            raise TypeError(f"{type(self.allocator).__name__} has no construct")
        self.allocator.construct(p, *args)

    def destroy(self, p: Any) -> None:
        """Let the shared allocator destroy the object at ``p``."""
        if not meta.has_destroy(self.allocator):
            raise TypeError(f"{type(self.allocator).__name__} has no destroy")
        self.allocator.destroy(p)

    def max_size(self) -> int:
        """The shared allocator's maximum allocation size."""
        if not meta.has_max_size(self.allocator):
            raise TypeError(f"{type(self.allocator).__name__} has no max_size")
        return self.allocator.max_size()

    def owns(self, p: Any) -> bool:
        """Whether the shared allocator owns ``p``."""
        if not meta.has_owns(self.allocator):
            raise TypeError(f"{type(self.allocator).__name__} has no owns")
        return self.allocator.owns(p)

    def set_allocator(self, value: Any) -> None:
        """Replace the shared allocator for every wrapper of this type."""
        _check_untyped(value)
        with Global._lock:
            Global._instances[self.allocator_type] = value


def _check_untyped(allocator: Any) -> None:
    if hasattr(allocator, "value_type"):
        raise TypeError("building on top of typed allocators is not allowed; use an untyped allocator")