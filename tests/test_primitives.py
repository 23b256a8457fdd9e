import random

import pytest

from graphforge.primitives import (
    approximate_kth_smallest,
    fetch_and_add_threshold,
    filter_index,
    filterf,
    hash32,
    hash64,
    hash_combine,
    kth_smallest,
    map_with_index,
    num_blocks,
    pack_index,
    pack_index_and_data,
    reduce_max,
    reduce_min,
    reduce_xor,
    write_max,
    write_min,
)


def test_hash64_deterministic_and_in_range():
    values = [hash64(i) for i in range(200)]
    assert values == [hash64(i) for i in range(200)]
    assert all(0 <= v < 2**64 for v in values)
    assert len(set(values)) == len(values)


def test_hash32_deterministic_and_in_range():
    values = [hash32(i) for i in range(200)]
    assert values == [hash32(i) for i in range(200)]
    assert all(0 <= v < 2**32 for v in values)
    assert len(set(values)) == len(values)


def test_hash_combine_zero_gives_golden_ratio_constant():
    assert hash_combine(0, 0) == 0x9E3779B97F4A7C15


def test_hash_combine_stays_64_bit_and_order_matters():
    a = hash_combine(hash64(1), hash64(2))
    b = hash_combine(hash64(2), hash64(1))
    assert 0 <= a < 2**64
    assert 0 <= b < 2**64
    assert a != b


@pytest.mark.parametrize("n,block,expected", [(0, 10, 0), (10, 10, 1), (11, 10, 2), (1, 1024, 1)])
def test_num_blocks(n, block, expected):
    assert num_blocks(n, block) == expected


def test_reductions():
    data = [5, 3, 9, 1, 7]
    assert reduce_max(data) == max(data)
    assert reduce_min(data) == min(data)
    assert reduce_xor([6, 6]) == 0
    assert reduce_xor([]) == 0
    assert reduce_xor([data[0]]) == data[0]


def test_reduce_empty_raises():
    with pytest.raises(ValueError):
        reduce_max([])
    with pytest.raises(ValueError):
        reduce_min([])


def test_map_with_index_pairs_index_and_value():
    result = map_with_index(["a", "b", "c"], lambda i, v: (i, v))
    assert result == [(0, "a"), (1, "b"), (2, "c")]


def test_filter_index_uses_index():
    data = [10, 20, 30, 40]
    assert filter_index(data, lambda v, i: i % 2 == 0) == [10, 30]


def test_pack_index():
    assert pack_index([True, False, True, True]) == [0, 2, 3]
    assert pack_index([]) == []


def test_pack_index_and_data():
    pairs = [(False, "x"), (True, "y"), (True, "z")]
    assert pack_index_and_data(pairs) == [(1, "y"), (2, "z")]


def test_filterf_preserves_order_for_large_inputs():
    data = list(range(5000))
    out = filterf(data, lambda x: x % 3 == 0)
    assert out == [x for x in data if x % 3 == 0]


@pytest.mark.parametrize("k", [0, 5, 17, 49])
def test_kth_smallest_matches_sorted(k):
    rng = random.Random(7)
    data = [rng.randrange(30) for _ in range(50)]
    assert kth_smallest(data, k, None, random.Random(k)) == sorted(data)[k]


def test_kth_smallest_custom_order():
    data = list(range(20))
    greater = lambda a, b: a > b
    assert kth_smallest(data, 0, greater, random.Random(1)) == max(data)


def test_kth_smallest_out_of_range():
    with pytest.raises(IndexError):
        kth_smallest([1, 2, 3], 3)


def test_approximate_kth_smallest_returns_element():
    data = list(range(1000))
    result = approximate_kth_smallest(data, 500, None, random.Random(3))
    assert result in data
    assert 200 <= result <= 800


def test_approximate_kth_smallest_empty_raises():
    with pytest.raises(ValueError):
        approximate_kth_smallest([], 0)


def test_write_min_and_max():
    arr = [5, 5]
    assert write_min(arr, 0, 3) is True
    assert write_min(arr, 0, 4) is False
    assert arr[0] == 3
    assert write_max(arr, 1, 9) is True
    assert write_max(arr, 1, 8) is False
    assert arr[1] == 9


def test_fetch_and_add_threshold():
    arr = [2]
    assert fetch_and_add_threshold(arr, 0, 3, 4) == 2
    assert arr[0] == 5
    assert fetch_and_add_threshold(arr, 0, 3, 4) is None
    assert arr[0] == 5