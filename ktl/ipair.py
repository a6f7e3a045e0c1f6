"""Iterate over a container while getting each element's index alongside it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterable, Iterator, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class IPairValue(Generic[V]):
    """An index (``first``) paired with the element found there (``second``)."""

    first: int
    second: V

    def __iter__(self) -> Iterator[Any]:
        yield self.first
        yield self.second


class IPairIterable(Generic[V]):
    """Wraps an iterable so that iterating it yields :class:`IPairValue` items.

    Indices count up from ``start``. The container is iterated afresh every
    time, so a list can be walked repeatedly while a generator is consumed once.
    """

    def __init__(self, container: Iterable[V], start: int = 0) -> None:
        self.container = container
        self.start = start

    def __iter__(self) -> Iterator[IPairValue[V]]:
        index = self.start
        for value in self.container:
            yield IPairValue(index, value)
            index += 1

    def __reversed__(self) -> Iterator[IPairValue[V]]:
        count = len(self.container)  # type: ignore[arg-type]
        index = self.start + count - 1
        for value in reversed(self.container):  # type: ignore[call-overload]
            yield IPairValue(index, value)
            index -= 1

    def __len__(self) -> int:
        return len(self.container)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"IPairIterable({self.container!r}, start={self.start})"


def ipair(container: Iterable[V], start: int = 0) -> IPairIterable[V]:
    """Wrap ``container`` so that iteration yields ``(index, value)`` pairs."""
    return IPairIterable(container, start)