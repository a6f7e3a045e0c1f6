import pytest

from ktl.global_allocator import Global
from ktl.mallocator import Mallocator
from ktl.memory import default_space
from ktl.stack_allocator import Stack, StackAllocator
from ktl.type_allocator import TypeAllocator


def _stack_factory(size=4096):
    def make():
        return StackAllocator(Stack(size))

    return make


def test_global_allocator_equality():
    factory = _stack_factory()
    alloc1 = TypeAllocator(float, Global(factory))
    alloc2 = TypeAllocator(tuple, Global(factory), item_size=8)
    assert alloc1 == alloc2
    assert alloc1.allocator.allocator is alloc2.allocator.allocator


def test_global_allocator_different_types_differ():
    first = Global(_stack_factory())
    second = Global(_stack_factory())
    assert (first != second) is True
    assert first.allocator is not second.allocator
    p = first.allocate(16)
    assert first.owns(p) is True
    assert second.owns(p) is False
    first.deallocate(p, 16)


def test_global_allocator_raw_allocate():
    alloc = Global(_stack_factory())
    sizes = [2, 4, 8, 16, 32, 64]
    pointers = [alloc.allocate(n) for n in sizes]
    assert None not in pointers
    assert len(set(pointers)) == len(sizes)
    assert all(alloc.owns(p) for p in pointers)
    for p, n in reversed(list(zip(pointers, sizes))):
        alloc.deallocate(p, n)
    assert alloc.allocator.block.object_count == 0
    assert alloc.allocator.block.free == alloc.allocator.block.data


def test_global_allocator_shares_state_between_instances():
    factory = _stack_factory()
    first = Global(factory)
    second = Global(factory)
    p = first.allocate(32)
    assert second.owns(p)
    assert second.allocator.block.object_count == 32
    second.deallocate(p, 32)
    assert first.allocator.block.object_count == 0


def test_global_allocator_max_size():
    assert Global(_stack_factory(1024)).max_size() == 1024


def test_global_allocator_set_allocator_affects_all():
    factory = _stack_factory()
    first = Global(factory)
    second = Global(factory)
    replacement = StackAllocator(Stack(512))
    first.set_allocator(replacement)
    assert second.allocator is replacement
    assert second.max_size() == 512


def test_global_allocator_rejects_typed():
    alloc = Global(_stack_factory())
    with pytest.raises(TypeError):
        alloc.set_allocator(TypeAllocator(float, Mallocator()))


def test_global_allocator_missing_capabilities():
    def make():
        return Mallocator()

    alloc = Global(make)
    with pytest.raises(TypeError):
        alloc.owns(0)
    with pytest.raises(TypeError):
        alloc.max_size()
    with pytest.raises(TypeError):
        alloc.construct(0, float, 1.0)


def test_global_typed_construct_roundtrip():
    def make():
        return Mallocator()

    alloc = TypeAllocator(float, Global(make))
    p = alloc.allocate(1)
    alloc.construct(p, 4.2)
    assert default_space().load(p) == 4.2
    alloc.destroy(p)
    alloc.deallocate(p, 1)
    with pytest.raises(ValueError):
        default_space().load(p)