"""Capability checks and source locations shared by the allocators.

Untyped allocators follow a small protocol: ``allocate(n)`` or
``allocate(n, source)``, ``deallocate(p, n)`` and, optionally, ``owns(p)``,
``max_size()``, ``construct(p, factory, *args)`` and ``destroy(p)``. A
wrapper whose optional methods depend on what it wraps may define
``_supports(name)`` to report whether a method is really usable.
"""

from __future__ import annotations

import functools
import sys
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SourceLocation:
    """The place in the code that asked for an allocation."""

    file_name: str = ""
    line: int = 0
    function_name: str = ""

    @classmethod
    def current(cls, depth: int = 0) -> "SourceLocation":
        """Describe the caller, or a frame ``depth`` levels above it."""
        frame = sys._getframe(depth + 1)
        code = frame.f_code
        return cls(code.co_filename, frame.f_lineno, code.co_name)


@functools.lru_cache(maxsize=None)
def _accepts_source(cls: type) -> bool:
    method = getattr(cls, "allocate", None)
    method = getattr(method, "__func__", method)
    while hasattr(method, "__wrapped__"):
        method = method.__wrapped__
    code = getattr(method, "__code__", None)
    if code is None:
        return False
    names = code.co_varnames[: code.co_argcount + code.co_kwonlyargcount]
    return "source" in names


def allocate(alloc: Any, n: int, source: SourceLocation | None = None) -> Any:
    """Allocate ``n`` bytes, passing a source location if the allocator takes one."""
    if _accepts_source(type(alloc)):
        if source is None:
            source = SourceLocation.current(1)
        return alloc.allocate(n, source)
    return alloc.allocate(n)


def _has(alloc: Any, name: str) -> bool:
    if not callable(getattr(alloc, name, None)):
        return False
    supports = getattr(alloc, "_supports", None)
    return supports is None or bool(supports(name))


def has_owns(alloc: Any) -> bool:
    """Whether ``alloc`` can tell if it owns an address."""
    return _has(alloc, "owns")


def has_max_size(alloc: Any) -> bool:
    """Whether ``alloc`` reports a maximum allocation size."""
    return _has(alloc, "max_size")


def has_construct(alloc: Any) -> bool:
    """Whether ``alloc`` constructs objects itself."""
    return _has(alloc, "construct")


def has_destroy(alloc: Any) -> bool:
    """Whether ``alloc`` destroys objects itself."""
    return _has(alloc, "destroy")