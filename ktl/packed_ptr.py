"""A pointer that stores a small integer in its unused alignment bits."""

from __future__ import annotations

from .utility import ALIGNMENT, log2

_UINTPTR_MASK = (1 << 64) - 1


class PackedPtr:
    """Packs an aligned address and a ``bits``-wide integer into one word.

    The integer is stored offset by ``minimum``, so it may take any value
    from ``minimum`` to ``maximum``; ``maximum`` defaults to the largest
    value that fits in ``bits`` bits. The null pointer is ``None``.
    """

    def __init__(
        self,
        bits: int,
        minimum: int = 0,
        maximum: int | None = None,
        alignment: int = ALIGNMENT,
        ptr: int | None = None,
        value: int | None = None,
    ) -> None:
        if alignment <= 0 or alignment & (alignment - 1):
            raise ValueError(f"alignment must be a power of two, got {alignment}")
        free_bits = log2(alignment)
        if not 0 <= bits <= free_bits:
            raise ValueError(f"the number of bits in use ({bits}) cannot surpass the number of free bits ({free_bits})")
        self.bits = bits
        self.alignment = alignment
        self.free_bits = free_bits
        self.minimum = minimum
        self.maximum = minimum + (1 << bits) - 1 if maximum is None else maximum
        self._int_mask = (1 << bits) - 1
        self._ptr_mask = ~((1 << free_bits) - 1) & _UINTPTR_MASK
        self._value = 0
        if ptr is not None or value is not None:
            self._check_alignment(ptr)
            self._value = self._from_ptr(ptr) | self._from_int(minimum if value is None else value)

    def __repr__(self) -> str:
        ptr = self.get_ptr()
        shown = "None" if ptr is None else f"{ptr:#x}"
        return f"PackedPtr(ptr={shown}, value={self.get_int()})"

    def get_ptr(self) -> int | None:
        """The stored address, or ``None`` for the null pointer."""
        address = self._value & self._ptr_mask
        return address or None

    def get_int(self) -> int:
        """The stored integer."""
        return (self._value & self._int_mask) + self.minimum

    def set_ptr(self, p: int | None) -> None:
        """Store a new address, keeping the integer."""
        self._check_alignment(p)
        self._value = self._from_ptr(p) | (self._value & self._int_mask)

    def set_int(self, value: int) -> None:
        """Store a new integer, keeping the address."""
        if not self.minimum <= value <= self.maximum:
            raise ValueError(f"value {value} is outside [{self.minimum}, {self.maximum}]")
        self._value = (self._value & self._ptr_mask) | self._from_int(value)

    def _check_alignment(self, p: int | None) -> None:
        if p is None:
            return
        if not 0 <= p <= _UINTPTR_MASK:
            raise ValueError(f"address {p!r} does not fit in a pointer")
        if p & (self.alignment - 1):
            raise ValueError(f"address {p:#x} is not aligned to {self.alignment}")

    def _from_ptr(self, p: int | None) -> int:
        return (p or 0) & self._ptr_mask

    def _from_int(self, value: int) -> int:
        return (value - self.minimum) & self._int_mask