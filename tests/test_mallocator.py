import random
import struct

import pytest

from ktl.mallocator import Mallocator
from ktl.memory import default_space
from ktl.type_allocator import TypeAllocator
from ktl.utility import ALIGNMENT

DOUBLES = [0.0, 8.0, 9.0, 10.0, 20.0, 28.0, 32.0, 58.0]
TRIVIALS = [
    (0.0, 0.0), (8.0, 7.0), (10.0, 9.0), (9.0, 11.0),
    (20.0, 3.0), (32.0, 8.0), (28.0, 24.0), (58.0, 31.0),
]


def test_mallocator_raw_allocate():
    alloc = Mallocator()
    space = default_space()
    sizes = [4, 8, 16, 32, 64, 128]
    blocks = {alloc.allocate(size): bytes([size]) * size for size in sizes}
    assert len(blocks) == len(sizes)
    for p, payload in blocks.items():
        assert p % ALIGNMENT == 0
        space.write(p, payload)
    assert {p: space.read(p, len(payload)) for p, payload in blocks.items()} == blocks
    for p, payload in blocks.items():
        alloc.deallocate(p, len(payload))
        with pytest.raises(ValueError):
            space.read(p, 1)


def test_mallocator_unordered_double():
    alloc = TypeAllocator(float, Mallocator())
    space = default_space()
    pointers = []
    for value in DOUBLES:
        p = alloc.allocate(1)
        alloc.construct(p, value)
        pointers.append(p)
    assert [space.load(p) for p in pointers] == DOUBLES
    order = list(zip(pointers, DOUBLES))
    random.Random(0).shuffle(order)
    for p, value in order:
        assert space.load(p) == value
        alloc.destroy(p)
        alloc.deallocate(p, 1)
    with pytest.raises(ValueError):
        space.read(pointers[0], 1)


@pytest.mark.parametrize(
    "value_type, layout, items",
    [
        (float, "<d", [(value,) for value in DOUBLES]),
        (tuple, "<2f", TRIVIALS),
    ],
)
def test_mallocator_buffer(value_type, layout, items):
    size = struct.calcsize(layout)
    alloc = TypeAllocator(value_type, Mallocator(), item_size=size)
    space = default_space()
    p = alloc.allocate(len(items))
    space.write(p, b"".join(struct.pack(layout, *item) for item in items))
    data = space.read(p, size * len(items))
    assert list(struct.iter_unpack(layout, data)) == items
    alloc.deallocate(p, len(items))


def test_mallocators_are_all_equal():
    assert Mallocator() == Mallocator()
    assert not (Mallocator() != Mallocator())
    assert hash(Mallocator()) == hash(Mallocator())
    assert TypeAllocator(float, Mallocator()) == TypeAllocator(int, Mallocator())