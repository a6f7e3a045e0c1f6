"""Alignment and bit helpers shared by the allocators."""

ALIGNMENT = 16
"""Alignment of every block handed out by the allocators, in bytes."""

ALIGNMENT_MASK = ALIGNMENT - 1

_UINTMAX_LIMIT = 1 << 64


def align_to_architecture(n: int) -> int:
    """Return the padding that rounds ``n`` bytes up to a multiple of ``ALIGNMENT``."""
    if n < 0:
        raise ValueError(f"size must not be negative, got {n}")
    remainder = n & ALIGNMENT_MASK
    return ALIGNMENT - remainder if remainder else 0


def log2(n: int) -> int:
    """Return the floor of the base-2 logarithm of an unsigned 64-bit ``n``; 0 for 0."""
    if not 0 <= n < _UINTMAX_LIMIT:
        raise ValueError(f"value must fit in an unsigned 64-bit integer, got {n}")
    return max(n.bit_length() - 1, 0)