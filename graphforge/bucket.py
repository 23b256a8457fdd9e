"""A work-efficient bucketing structure mapping identifiers to integer buckets.

Only ``total_buckets - 1`` buckets of the current range are held explicitly.
Identifiers whose bucket lies beyond that range wait in one overflow bucket.
They are redistributed when the open buckets run out.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, MutableSequence, Sequence
from dataclasses import dataclass, field
from typing import Optional

UINT_E_MAX = (1 << 32) - 1
NULL_BKT = UINT_E_MAX

Update = Optional[tuple[int, int]]


class BucketOrder(enum.Enum):
    """Order in which buckets are handed out."""

    DECREASING = 0
    INCREASING = 1


@dataclass
class Bucket:
    """A bucket returned by :meth:`Buckets.next_bucket`.

    ``id`` is ``NULL_BKT`` once no buckets remain. ``num_filtered`` is the
    number of entries examined, stale ones included.
    """

    id: int
    identifiers: list[int] = field(default_factory=list)
    num_filtered: int = 0


class Buckets:
    """Dynamic mapping from identifiers to buckets, read through ``d``.

    ``d[i]`` is the bucket that currently holds identifier ``i``. It is
    ``NULL_BKT`` when ``i`` is in no bucket. The caller owns ``d`` and keeps
    it current. Stale entries are dropped lazily when a bucket is extracted.
    """

    null_bkt = NULL_BKT

    def __init__(
        self,
        n: int,
        d: MutableSequence[int],
        order: BucketOrder = BucketOrder.INCREASING,
        total_buckets: int = 128,
    ) -> None:
        if total_buckets < 2:
            raise ValueError("total_buckets must be at least 2")
        if not isinstance(order, BucketOrder):
            raise ValueError(
                f"Unknown order: {order!r}. Must be one of {{increasing, decreasing}}"
            )
        self.n = n
        self.d = d
        self.order = order
        self.total_buckets = total_buckets
        self.open_buckets = total_buckets - 1
        self.cur_bkt = 0
        self.num_elms = 0
        self._bkts: list[list[int]] = [[] for _ in range(total_buckets)]

        values = [d[i] for i in range(n)]
        if order is BucketOrder.INCREASING:
            min_b = min(values, default=NULL_BKT)
            self.cur_range = min_b // self.open_buckets
        else:
            max_b = max((0 if b == NULL_BKT else b for b in values), default=0)
            self.cur_range = (max_b + self.open_buckets) // self.open_buckets

        self.update_buckets(
            (i, self._to_range(b) if b != NULL_BKT else NULL_BKT)
            for i, b in enumerate(values)
        )

    def __len__(self) -> int:
        return self.num_elms

    def next_bucket(self) -> Bucket:
        """Return the next non-empty bucket, or one with id ``NULL_BKT`` if none remain."""
        while True:
            while not self._bkts[self.cur_bkt] and self.num_elms > 0:
                self._advance()
            if self.num_elms == 0:
                return Bucket(NULL_BKT, [], 0)
            bucket = self._take_current()
            if bucket is not None:
                return bucket

    def get_bucket(self, prev: int, nxt: int) -> int:
        """Destination for an identifier moving from bucket ``prev`` to ``nxt``."""
        pb = self._to_range(prev)
        nb = self._to_range(nxt)
        if nb != NULL_BKT and (prev == NULL_BKT or pb != nb or nb == self.cur_bkt):
            return nb
        return NULL_BKT

    def get_bucket_dest(self, nxt: int) -> int:
        """Destination for an identifier moving to bucket ``nxt``.

        Priorities are taken to be strictly decreasing, with every identifier
        already in the structure.
        """
        nb = self._to_range(nxt)
        if self.order is BucketOrder.INCREASING:
            if nb != NULL_BKT and nb != self.open_buckets:
                return nb
        elif nb != NULL_BKT:
            return nb
        return NULL_BKT

    def update_buckets(self, updates: Iterable[Update]) -> int:
        """Insert ``(identifier, destination)`` pairs.

        ``None`` entries and ``NULL_BKT`` destinations are skipped. Returns
        the number of entries inserted.
        """
        added = 0
        for update in updates:
            if update is None:
                continue
            ident, dest = update
            if dest == NULL_BKT:
                continue
            if not 0 <= dest < self.total_buckets:
                raise IndexError(f"bucket destination {dest} is out of range")
            self._bkts[dest].append(ident)
            added += 1
        self.num_elms += added
        return added

    def _advance(self) -> None:
        self.cur_bkt += 1
        if self.cur_bkt == self.open_buckets:
            self._unpack()
            self.cur_bkt = 0

    def _unpack(self) -> None:
        overflow = self._bkts[self.open_buckets]
        pending = list(overflow)
        m = len(pending)
        if self.order is BucketOrder.INCREASING:
            self.cur_range += 1
        else:
            self.cur_range -= 1
        overflow.clear()

        if m != self.num_elms:
            raise RuntimeError(
                f"corruption in bucket structure: m = {m}, num_elms = {self.num_elms}"
            )
        updated = self.update_buckets((v, self._to_range(self.d[v])) for v in pending)
        num_in_range = updated - len(overflow)
        if num_in_range == 0 and overflow:
            ids = [self.d[v] for v in overflow]
            if self.order is BucketOrder.INCREASING:
                # Incremented again by the next unpack.
                self.cur_range = min(ids) // self.open_buckets - 1
            else:
                # Decremented again by the next unpack.
                self.cur_range = (self.open_buckets + max(ids)) // self.open_buckets + 1
        self.num_elms -= m

    def _to_range(self, bkt: int) -> int:
        if bkt == NULL_BKT:
            return NULL_BKT
        ob = self.open_buckets
        if self.order is BucketOrder.INCREASING:
            if bkt < self.cur_range * ob:
                return NULL_BKT
            return bkt % ob if bkt < (self.cur_range + 1) * ob else ob
        if bkt >= self.cur_range * ob:
            return NULL_BKT
        if bkt >= (self.cur_range - 1) * ob:
            return (ob - (bkt % ob)) - 1
        return ob

    def _current_bucket_num(self) -> int:
        if self.order is BucketOrder.INCREASING:
            return self.cur_range * self.open_buckets + self.cur_bkt
        return self.cur_range * self.open_buckets - self.cur_bkt - 1

    def _take_current(self) -> Optional[Bucket]:
        entries = self._bkts[self.cur_bkt]
        size = len(entries)
        self.num_elms -= size
        number = self._current_bucket_num()
        filtered = [v for v in entries if self.d[v] == number]
        entries.clear()
        if not filtered:
            return None
        return Bucket(number, filtered, size)


def make_buckets(
    n: int,
    d: MutableSequence[int],
    order: BucketOrder = BucketOrder.INCREASING,
    total_buckets: int = 128,
) -> Buckets:
    """Create a :class:`Buckets` structure over identifiers ``0 .. n-1``."""
    return Buckets(n, d, order, total_buckets)


def wrap(left: int, right: int) -> Optional[tuple[int, int]]:
    """Pair ``left`` and ``right`` unless either one is ``UINT_E_MAX``."""
    if left != UINT_E_MAX and right != UINT_E_MAX:
        return (left, right)
    return None


__all__: Sequence[str] = (
    "UINT_E_MAX",
    "NULL_BKT",
    "BucketOrder",
    "Bucket",
    "Buckets",
    "make_buckets",
    "wrap",
)