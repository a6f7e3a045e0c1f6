import pytest

from ktl.utility import ALIGNMENT, align_to_architecture, log2


@pytest.mark.parametrize("n", range(0, 100))
def test_padding_rounds_up_to_alignment(n):
    pad = align_to_architecture(n)
    assert 0 <= pad < ALIGNMENT
    assert (n + pad) % ALIGNMENT == 0


@pytest.mark.parametrize("k", range(0, 20))
def test_multiples_need_no_padding(k):
    assert align_to_architecture(k * ALIGNMENT) == 0


def test_padding_of_negative_size_is_rejected():
    with pytest.raises(ValueError):
        align_to_architecture(-1)


@pytest.mark.parametrize("k", range(0, 64))
def test_log2_of_powers_of_two(k):
    assert log2(1 << k) == k


@pytest.mark.parametrize("k", range(1, 64))
def test_log2_floors_between_powers(k):
    assert log2((1 << (k + 1)) - 1) == k
    assert log2((1 << k) + 1) == k


def test_log2_of_zero_is_zero():
    assert log2(0) == 0


@pytest.mark.parametrize("bad", [-1, 1 << 64])
def test_log2_rejects_values_outside_uintmax(bad):
    with pytest.raises(ValueError):
        log2(bad)