import io
from collections import Counter

import pytest

from ktl.profiler import (
    MAX_BENCHMARKS,
    Profiler,
    perform_allocation,
    perform_ordered_deallocation,
    perform_unordered_allocation,
    perform_unordered_deallocation,
)


class FakeClock:
    def __init__(self):
        self.now = 0

    def __call__(self):
        return self.now


class Recorder:
    """A fake allocator that records every call."""

    def __init__(self):
        self._next = 16
        self.allocated = []
        self.freed = []

    def allocate(self, n):
        address = self._next
        self._next += 16
        self.allocated.append(address)
        return address

    def deallocate(self, p, n):
        self.freed.append(p)


def test_pause_adds_time_since_start():
    clock = FakeClock()
    profiler = Profiler(clock=clock)
    profiler.start()
    clock.now = 5000
    profiler.pause()
    assert profiler.elapsed == 5
    assert profiler.paused


def test_second_pause_adds_nothing():
    clock = FakeClock()
    profiler = Profiler(clock=clock)
    profiler.start()
    clock.now = 4000
    profiler.pause()
    first = profiler.elapsed
    clock.now = 9000
    profiler.pause()
    assert profiler.elapsed == first


def test_time_while_paused_is_not_counted():
    clock = FakeClock()
    profiler = Profiler(clock=clock)
    profiler.start()
    clock.now = 2000
    profiler.pause()
    after_first = profiler.elapsed
    clock.now = 100000
    profiler.resume()
    clock.now = 102000
    profiler.pause()
    assert profiler.elapsed == 2 * after_first


def test_start_resets_to_given_duration():
    clock = FakeClock()
    profiler = Profiler(clock=clock)
    profiler.start(10.0)
    profiler.pause()
    assert profiler.elapsed == 10.0


def test_run_all_benchmarks_averages_runs():
    clock = FakeClock()
    profiler = Profiler(run_count=2, clock=clock)

    @profiler.benchmark("tick")
    def tick(p):
        clock.now += 3000

    out = io.StringIO()
    results = profiler.run_all_benchmarks(out)
    assert results == {"tick": 3.0}
    assert out.getvalue().startswith("tick:")


def test_benchmark_decorator_uses_function_name():
    profiler = Profiler(run_count=1)

    @profiler.benchmark()
    def my_bench(p):
        pass

    assert profiler.benchmarks == ("my_bench",)


def test_results_keep_registration_order():
    profiler = Profiler(run_count=1)
    names = ["b", "a", "c"]
    for name in names:
        profiler.add_benchmark(name, lambda p: None)
    results = profiler.run_all_benchmarks(io.StringIO())
    assert list(results) == names
    assert all(value >= 0 for value in results.values())


def test_duplicate_benchmark_rejected():
    profiler = Profiler()
    profiler.add_benchmark("x", lambda p: None)
    with pytest.raises(ValueError):
        profiler.add_benchmark("x", lambda p: None)


def test_benchmark_limit():
    profiler = Profiler()
    for i in range(MAX_BENCHMARKS):
        profiler.add_benchmark(f"b{i}", lambda p: None)
    assert len(profiler.benchmarks) == MAX_BENCHMARKS
    with pytest.raises(ValueError):
        profiler.add_benchmark("one_too_many", lambda p: None)


def test_run_count_must_be_positive():
    with pytest.raises(ValueError):
        Profiler(run_count=0)


def test_perform_allocation_frees_everything_in_reverse():
    profiler = Profiler()
    profiler.start()
    alloc = Recorder()
    perform_allocation(profiler, alloc, 10)
    assert len(alloc.allocated) == 10
    assert alloc.freed == alloc.allocated[::-1]
    assert profiler.paused


def test_perform_ordered_deallocation_frees_in_reverse():
    profiler = Profiler()
    profiler.start()
    alloc = Recorder()
    perform_ordered_deallocation(profiler, alloc, 7)
    assert alloc.freed == alloc.allocated[::-1]
    assert profiler.paused


def test_perform_unordered_deallocation_frees_each_once():
    profiler = Profiler()
    profiler.start()
    alloc = Recorder()
    perform_unordered_deallocation(profiler, alloc, 50)
    assert len(alloc.allocated) == 50
    assert Counter(alloc.freed) == Counter(alloc.allocated)


def test_perform_unordered_allocation_balances():
    profiler = Profiler()
    profiler.start()
    alloc = Recorder()
    count = 20
    perform_unordered_allocation(profiler, alloc, count)
    assert len(alloc.allocated) == count + count // 2
    assert Counter(alloc.freed) == Counter(alloc.allocated)
    assert profiler.paused


def test_default_count_is_one():
    profiler = Profiler()
    profiler.start()
    alloc = Recorder()
    perform_allocation(profiler, alloc)
    assert len(alloc.allocated) == 1
    assert alloc.freed == alloc.allocated