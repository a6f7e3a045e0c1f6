"""A simulated address space that hands out aligned blocks of bytes.

Addresses are plain integers and ``None`` stands for the null pointer.
Besides raw bytes, a Python object can be placed at an address, which is
how typed allocators construct and destroy values.
"""

from __future__ import annotations

import bisect
import threading
from dataclasses import dataclass
from typing import Any

from .utility import ALIGNMENT


@dataclass
class _Block:
    start: int
    data: bytearray

    @property
    def end(self) -> int:
        return self.start + len(self.data)


class AddressSpace:
    """A flat, byte-addressable memory in which blocks never overlap."""

    def __init__(self, base: int = ALIGNMENT * 256) -> None:
        self._next = base
        self._starts: list[int] = []
        self._blocks: dict[int, _Block] = {}
        self._objects: dict[int, Any] = {}
        self._lock = threading.Lock()

    def allocate(self, size: int, alignment: int = ALIGNMENT) -> int:
        """Reserve ``size`` zeroed bytes at an address aligned to ``alignment``."""
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        if alignment <= 0 or alignment & (alignment - 1):
            raise ValueError(f"alignment must be a power of two, got {alignment}")
        with self._lock:
            start = -(-self._next // alignment) * alignment
            self._blocks[start] = _Block(start, bytearray(size))
            self._starts.append(start)
            # Keep a gap so that even empty blocks get distinct addresses.
            self._next = start + max(size, 1) + ALIGNMENT
        return start

    def free(self, address: int | None) -> None:
        """Release the block starting at ``address``; freeing ``None`` does nothing."""
        if address is None:
            return
        with self._lock:
            block = self._blocks.pop(address, None)
            if block is None:
                raise ValueError(f"{address:#x} is not the start of an allocated block")
            del self._starts[bisect.bisect_left(self._starts, address)]
            for key in [k for k in self._objects if block.start <= k < max(block.end, block.start + 1)]:
                del self._objects[key]

    def _find(self, address: int | None, size: int) -> _Block:
        if address is None:
            raise ValueError("access through a null pointer")
        with self._lock:
            index = bisect.bisect_right(self._starts, address) - 1
            if index >= 0:
                block = self._blocks[self._starts[index]]
                if address + size <= block.end:
                    return block
        raise ValueError(f"access of {size} bytes at {address:#x} is outside allocated memory")

    def read(self, address: int, size: int) -> bytes:
        """Return ``size`` bytes starting at ``address``."""
        block = self._find(address, size)
        offset = address - block.start
        return bytes(block.data[offset:offset + size])

    def write(self, address: int, data: bytes) -> None:
        """Copy ``data`` into memory starting at ``address``."""
        payload = bytes(data)
        block = self._find(address, len(payload))
        offset = address - block.start
        block.data[offset:offset + len(payload)] = payload

    def fill(self, address: int, value: int, size: int) -> None:
        """Set ``size`` bytes at ``address`` to the low byte of ``value``."""
        self.write(address, bytes([value & 0xFF]) * size)

    def store(self, address: int, obj: Any) -> None:
        """Place ``obj`` at ``address``, which must lie inside an allocated block."""
        self._find(address, 1)
        self._objects[address] = obj

    def load(self, address: int) -> Any:
        """Return the object placed at ``address``."""
        try:
            return self._objects[address]
        except KeyError:
            raise ValueError(f"no object lives at {address!r}") from None

    def discard(self, address: int) -> None:
        """Remove the object placed at ``address``."""
        try:
            del self._objects[address]
        except KeyError:
            raise ValueError(f"no object lives at {address!r}") from None


_DEFAULT_SPACE = AddressSpace()


def default_space() -> AddressSpace:
    """Return the process-wide address space used by the heap allocators."""
    return _DEFAULT_SPACE


def aligned_malloc(size: int, alignment: int) -> int:
    """Allocate ``size`` bytes aligned to ``alignment`` from the default space."""
    return _DEFAULT_SPACE.allocate(size, alignment)


def aligned_free(address: int | None) -> None:
    """Free memory obtained from :func:`aligned_malloc`."""
    _DEFAULT_SPACE.free(address)