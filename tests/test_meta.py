import sys

from ktl import meta
from ktl.meta import SourceLocation


class PlainAllocator:
    def __init__(self):
        self.calls = []

    def allocate(self, n):
        self.calls.append((n,))
        return n

    def deallocate(self, p, n):
        pass


class SourceAllocator:
    def __init__(self):
        self.calls = []

    def allocate(self, n, source=None):
        self.calls.append((n, source))
        return n

    def deallocate(self, p, n):
        pass


class FullAllocator(PlainAllocator):
    def owns(self, p):
        return True

    def max_size(self):
        return 1024

    def construct(self, p, factory, *args):
        pass

    def destroy(self, p):
        pass


class Wrapper(FullAllocator):
    def __init__(self, inner):
        super().__init__()
        self.inner = inner

    def _supports(self, name):
        return meta._has(self.inner, name)


def _where_am_i():
    return SourceLocation.current(1)


def test_current_describes_caller():
    location = SourceLocation.current()
    line = sys._getframe().f_lineno - 1
    assert location.file_name == __file__
    assert location.function_name == "test_current_describes_caller"
    assert location.line == line


def test_current_with_depth_describes_outer_frame():
    location = _where_am_i()
    assert location.function_name == "test_current_with_depth_describes_outer_frame"


def test_allocate_plain_allocator_gets_no_source():
    alloc = PlainAllocator()
    assert meta.allocate(alloc, 16, SourceLocation("f.py", 1, "g")) == 16
    assert alloc.calls == [(16,)]


def test_allocate_forwards_given_source():
    alloc = SourceAllocator()
    source = SourceLocation("f.py", 1, "g")
    meta.allocate(alloc, 32, source)
    assert alloc.calls == [(32, source)]


def test_allocate_fills_in_caller_source():
    alloc = SourceAllocator()
    meta.allocate(alloc, 8)
    (n, source), = alloc.calls
    assert n == 8
    assert source.function_name == "test_allocate_fills_in_caller_source"


def test_capabilities_of_plain_allocator():
    alloc = PlainAllocator()
    assert not meta.has_owns(alloc)
    assert not meta.has_max_size(alloc)
    assert not meta.has_construct(alloc)
    assert not meta.has_destroy(alloc)


def test_capabilities_of_full_allocator():
    alloc = FullAllocator()
    assert meta.has_owns(alloc)
    assert meta.has_max_size(alloc)
    assert meta.has_construct(alloc)
    assert meta.has_destroy(alloc)


def test_supports_hook_limits_capabilities():
    assert not meta.has_owns(Wrapper(PlainAllocator()))
    assert not meta.has_destroy(Wrapper(PlainAllocator()))
    assert meta.has_owns(Wrapper(FullAllocator()))