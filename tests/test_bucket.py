import random

import pytest

from graphforge.bucket import (
    NULL_BKT,
    UINT_E_MAX,
    Bucket,
    BucketOrder,
    Buckets,
    make_buckets,
    wrap,
)


def drain(buckets):
    out = []
    while True:
        b = buckets.next_bucket()
        if b.id == NULL_BKT:
            return out
        out.append((b.id, sorted(b.identifiers)))


def test_increasing_order_without_updates():
    d = [3, 1, 2, 1, NULL_BKT]
    b = make_buckets(len(d), d, BucketOrder.INCREASING, 3)
    assert drain(b) == [(1, [1, 3]), (2, [2]), (3, [0])]


def test_decreasing_order_without_updates():
    d = [3, 1, 2, 1, NULL_BKT]
    b = make_buckets(len(d), d, BucketOrder.DECREASING, 3)
    assert drain(b) == [(3, [0]), (2, [2]), (1, [1, 3])]


@pytest.mark.parametrize("order", list(BucketOrder))
@pytest.mark.parametrize("total", [2, 3, 5, 128])
def test_random_inputs_come_out_grouped_and_ordered(order, total):
    rng = random.Random(total)
    d = [rng.randrange(40) for _ in range(60)] + [NULL_BKT] * 3
    result = drain(Buckets(len(d), d, order, total))
    ids = [bid for bid, _ in result]
    assert ids == sorted(ids, reverse=order is BucketOrder.DECREASING)
    assert len(set(ids)) == len(ids)
    seen = sorted(v for _, vs in result for v in vs)
    assert seen == [i for i, x in enumerate(d) if x != NULL_BKT]
    for bid, vs in result:
        assert all(d[v] == bid for v in vs)


def test_exhausted_structure_keeps_returning_null():
    d = [0]
    b = Buckets(1, d, BucketOrder.INCREASING, 4)
    assert b.next_bucket().identifiers == [0]
    assert b.next_bucket().id == NULL_BKT
    assert b.next_bucket() == Bucket(NULL_BKT, [], 0)


def test_empty_structure():
    assert drain(Buckets(0, [], BucketOrder.INCREASING, 4)) == []
    assert drain(Buckets(0, [], BucketOrder.DECREASING, 4)) == []


def test_moving_identifier_via_get_bucket_filters_stale_entry():
    d = [1, 2, 2]
    b = Buckets(3, d, BucketOrder.INCREASING, 4)
    first = b.next_bucket()
    assert (first.id, first.identifiers) == (1, [0])
    d[2] = 1
    dest = b.get_bucket(2, 1)
    assert dest == 1
    assert b.update_buckets([(2, dest)]) == 1
    second = b.next_bucket()
    assert (second.id, second.identifiers) == (1, [2])
    third = b.next_bucket()
    assert (third.id, third.identifiers) == (2, [1])
    assert third.num_filtered == 2
    assert b.next_bucket().id == NULL_BKT


def test_lazy_overflow_picks_up_changed_priorities():
    d = [4, 1, 4]
    b = Buckets(3, d, BucketOrder.INCREASING, 3)
    assert b.next_bucket().identifiers == [1]
    d[0] = 2
    assert b.get_bucket(4, 2) == NULL_BKT
    assert drain(b) == [(2, [0]), (4, [2])]


def test_get_bucket_from_null_previous():
    d = [0, 1]
    b = Buckets(2, d, BucketOrder.INCREASING, 4)
    assert b.get_bucket(NULL_BKT, 2) == 2
    assert b.get_bucket(2, NULL_BKT) == NULL_BKT


def test_get_bucket_dest_increasing_rejects_overflow():
    d = [0, 1]
    b = Buckets(2, d, BucketOrder.INCREASING, 4)
    assert b.get_bucket_dest(2) == 2
    assert b.get_bucket_dest(10) == NULL_BKT
    assert b.get_bucket_dest(NULL_BKT) == NULL_BKT


def test_get_bucket_dest_decreasing_allows_overflow():
    d = [10, 0]
    b = Buckets(2, d, BucketOrder.DECREASING, 4)
    overflow = b.open_buckets
    assert b.get_bucket_dest(0) == overflow
    assert b.get_bucket_dest(NULL_BKT) == NULL_BKT


def test_update_buckets_skips_none_and_null():
    d = [NULL_BKT, NULL_BKT, NULL_BKT]
    b = Buckets(3, d, BucketOrder.INCREASING, 4)
    assert len(b) == 0
    assert b.update_buckets([None, (0, NULL_BKT), wrap(1, UINT_E_MAX)]) == 0
    assert len(b) == 0


def test_update_buckets_rejects_bad_destination():
    d = [0]
    b = Buckets(1, d, BucketOrder.INCREASING, 4)
    with pytest.raises(IndexError):
        b.update_buckets([(0, 4)])


def test_too_few_buckets_rejected():
    with pytest.raises(ValueError):
        Buckets(1, [0], BucketOrder.INCREASING, 1)


def test_unknown_order_rejected():
    with pytest.raises(ValueError):
        Buckets(1, [0], "sideways", 4)


def test_wrap():
    assert wrap(3, 4) == (3, 4)
    assert wrap(UINT_E_MAX, 4) is None
    assert wrap(3, UINT_E_MAX) is None


def test_default_total_buckets():
    d = [5, 5]
    b = make_buckets(2, d)
    assert b.total_buckets == 128
    assert drain(b) == [(5, [0, 1])]