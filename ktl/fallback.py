"""An allocator that tries a primary allocator first and a fallback second."""

from __future__ import annotations

from typing import Any, Callable

from . import meta
from .memory import default_space
from .type_allocator import _CAPABILITIES, _require_untyped

_ANY_OF = frozenset({"construct", "destroy"})


class Fallback:
    """Delegates allocations between two untyped allocators.

    Every allocation goes to ``primary`` first and to ``fallback`` when the
    primary returns ``None``. The primary must be able to tell which
    addresses it owns, so that deallocations reach the right allocator.
    """

    def __init__(self, primary: Any, fallback: Any) -> None:
        _require_untyped(primary, fallback)
        if not meta.has_owns(primary):
            raise TypeError("the primary allocator is required to have an 'owns' method")
        self.primary = primary
        self.fallback = fallback

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Fallback):
            return self.primary == other.primary and self.fallback == other.fallback
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Fallback({self.primary!r}, {self.fallback!r})"

    def _supports(self, name: str) -> bool:
        check = _CAPABILITIES.get(name)
        if check is None:
            return True
        combine = any if name in _ANY_OF else all
        return combine(check(alloc) for alloc in (self.primary, self.fallback))

    def _require(self, name: str) -> None:
        if not self._supports(name):
            need = "either allocator" if name in _ANY_OF else "both allocators"
            raise TypeError(f"{need} must support {name}")

    def _owner_method(self, p: Any, name: str) -> Callable[..., Any] | None:
        self._require(name)
        owner = self.primary if self.primary.owns(p) else self.fallback
        if _CAPABILITIES[name](owner):
            return getattr(owner, name)
        return None

    def allocate(self, n: int, source: meta.SourceLocation | None = None) -> Any:
        """Allocate ``n`` bytes from the primary, or from the fallback if that fails."""
        if source is None:
            source = meta.SourceLocation.current(1)
        ptr = meta.allocate(self.primary, n, source)
        if ptr is None:
            return meta.allocate(self.fallback, n, source)
        return ptr

    def deallocate(self, p: Any, n: int) -> None:
        """Give ``n`` bytes at ``p`` back to whichever allocator owns them."""
        owner = self.primary if self.primary.owns(p) else self.fallback
        owner.deallocate(p, n)

    def construct(self, p: Any, *args: Any) -> None:
        """Build ``factory(*rest)`` at ``p``, where ``args`` is ``(factory, *rest)``."""
        method = self._owner_method(p, "construct")
        if not args:
            raise TypeError("construct needs a factory to build the object with")
        if method is not None:
            method(p, *args)
        else:
            factory, *rest = args
            default_space().store(p, factory(*rest))

    def destroy(self, p: Any) -> None:
        """Destroy the object at ``p`` through whichever allocator owns it."""
        method = self._owner_method(p, "destroy")
        if method is not None:
            method(p)
        else:
            default_space().discard(p)

    def max_size(self) -> int:
        """The larger of the two allocators' maximum sizes."""
        self._require("max_size")
        return max(self.primary.max_size(), self.fallback.max_size())

    def owns(self, p: Any) -> bool:
        """Whether either allocator owns ``p``."""
        self._require("owns")
        return bool(self.primary.owns(p)) or bool(self.fallback.owns(p))