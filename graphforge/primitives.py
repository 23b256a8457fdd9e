"""Sequence primitives, hashing helpers and atomic-style update operations."""

from __future__ import annotations

import functools
import math
import operator
import random
import threading
from collections.abc import Callable, Iterable, MutableSequence, Sequence
from typing import Any, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1

LOG_BLOCK_SIZE = 10
BLOCK_SIZE = 1 << LOG_BLOCK_SIZE
F_BLOCK_SIZE = 2000

_update_lock = threading.Lock()


def hash64(value: int) -> int:
    """Mix a 64-bit integer into a well-distributed 64-bit hash."""
    v = (value * 3935559000370003845 + 2691343689449507681) & _MASK64
    v ^= v >> 21
    v = (v ^ (v << 37)) & _MASK64
    v ^= v >> 4
    v = (v * 4768777513237032717) & _MASK64
    v = (v ^ (v << 20)) & _MASK64
    v ^= v >> 41
    v = (v ^ (v << 5)) & _MASK64
    return v


def hash32(value: int) -> int:
    """Mix a 32-bit integer into a well-distributed 32-bit hash."""
    z = (value + 0x6D2B79F5) & _MASK32
    z = ((z ^ (z >> 15)) * (z | 1)) & _MASK32
    z = (z ^ (z + ((z ^ (z >> 7)) * (z | 61)))) & _MASK32
    return z ^ (z >> 14)


def hash_combine(hash_value_1: int, hash_value_2: int) -> int:
    """Combine two 64-bit hash values into one."""
    h1 = hash_value_1 & _MASK64
    h2 = hash_value_2 & _MASK64
    mixed = (h2 + 0x9E3779B97F4A7C15 + ((h1 << 6) & _MASK64) + (h1 >> 2)) & _MASK64
    return h1 ^ mixed


def num_blocks(n: int, block_size: int) -> int:
    """Number of blocks of ``block_size`` needed to cover ``n`` items."""
    if n == 0:
        return 0
    return 1 + (n - 1) // block_size


def reduce_max(values: Iterable[T]) -> T:
    """Largest element; raises ValueError on an empty sequence."""
    items = list(values)
    if not items:
        raise ValueError("reduce_max of an empty sequence")
    return max(items)


def reduce_min(values: Iterable[T]) -> T:
    """Smallest element; raises ValueError on an empty sequence."""
    items = list(values)
    if not items:
        raise ValueError("reduce_min of an empty sequence")
    return min(items)


def reduce_xor(values: Iterable[int]) -> int:
    """Bitwise xor of all elements (0 for an empty sequence)."""
    return functools.reduce(operator.xor, values, 0)


def map_with_index(values: Iterable[T], func: Callable[[int, T], U]) -> list[U]:
    """Apply ``func(index, value)`` to every element."""
    return [func(i, v) for i, v in enumerate(values)]


def filter_index(values: Iterable[T], pred: Callable[[T, int], bool]) -> list[T]:
    """Keep the elements for which ``pred(value, index)`` holds."""
    return [v for i, v in enumerate(values) if pred(v, i)]


def pack_index(flags: Iterable[Any]) -> list[int]:
    """Indices of the truthy entries of ``flags``."""
    return [i for i, flag in enumerate(flags) if flag]


def pack_index_and_data(pairs: Iterable[tuple[Any, U]]) -> list[tuple[int, U]]:
    """For ``(flag, data)`` pairs, return ``(index, data)`` where flag is set."""
    return [(i, data) for i, (flag, data) in enumerate(pairs) if flag]


def filterf(values: Iterable[T], pred: Callable[[T], bool]) -> list[T]:
    """Keep the elements satisfying ``pred``, preserving order."""
    return [v for v in values if pred(v)]


def kth_smallest(
    values: Sequence[T],
    k: int,
    less: Optional[Callable[[T, T], bool]] = None,
    rng: Optional[random.Random] = None,
) -> T:
    """Return the element of rank ``k`` (0-based) under ``less``, by random pivoting."""
    less = less or operator.lt
    rng = rng or random.Random()
    current = list(values)
    if not 0 <= k < len(current):
        raise IndexError("k is out of range for the sequence")
    while True:
        n = len(current)
        pivot = current[rng.randrange(n)]
        smaller = [a for a in current if less(a, pivot)]
        if k < len(smaller):
            current = smaller
            continue
        larger = [a for a in current if less(pivot, a)]
        if k >= n - len(larger):
            k -= n - len(larger)
            current = larger
            continue
        return pivot


def approximate_kth_smallest(
    values: Sequence[T],
    k: int,
    less: Optional[Callable[[T, T], bool]] = None,
    rng: Optional[random.Random] = None,
) -> T:
    """Estimate the rank-``k`` element from a sorted random sample of about sqrt(n) items."""
    less = less or operator.lt
    rng = rng or random.Random()
    n = len(values)
    if n == 0:
        raise ValueError("approximate_kth_smallest of an empty sequence")
    if not 0 <= k < n:
        raise IndexError("k is out of range for the sequence")
    num_samples = int(n / math.sqrt(n))
    samples = [values[rng.randrange(n)] for _ in range(num_samples)]

    def compare(a: T, b: T) -> int:
        if less(a, b):
            return -1
        if less(b, a):
            return 1
        return 0

    samples.sort(key=functools.cmp_to_key(compare))
    return samples[k * num_samples // n]


def write_min(
    values: MutableSequence[T],
    index: int,
    value: T,
    less: Optional[Callable[[T, T], bool]] = None,
) -> bool:
    """Store ``value`` at ``index`` if it is smaller; return whether it was stored."""
    less = less or operator.lt
    with _update_lock:
        if less(value, values[index]):
            values[index] = value
            return True
        return False


def write_max(
    values: MutableSequence[T],
    index: int,
    value: T,
    less: Optional[Callable[[T, T], bool]] = None,
) -> bool:
    """Store ``value`` at ``index`` if it is larger; return whether it was stored."""
    less = less or operator.lt
    with _update_lock:
        if less(values[index], value):
            values[index] = value
            return True
        return False


def fetch_and_add_threshold(
    values: MutableSequence[Any], index: int, increment: Any, max_value: Any
) -> Optional[Any]:
    """Add ``increment`` unless the current value exceeds ``max_value``.

    Returns the previous value on success and None otherwise.
    """
    with _update_lock:
        old = values[index]
        if old <= max_value:
            values[index] = old + increment
            return old
        return None