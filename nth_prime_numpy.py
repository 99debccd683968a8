#!/usr/bin/env python3
import math
from typing import Iterator, NamedTuple

import numpy as np

from nth_prime_errors import InvalidArgument

DEFAULT_CHUNK_SIZE = 100_000_000
SMALL_LIMIT = 45
# Keeps every value, offset and p*p inside int64.
MAX_LIMIT = 2 ** 62


class Chunk(NamedTuple):
    index: int
    start: int
    size: int


def estimate_limit(n: int) -> int:
    """Heuristic upper bound on the prime at 0-indexed position n.

    n * ln(n * ln n) is the inverted prime-counting asymptotic. It is not a
    certified bound, so callers must check the sieve actually found n+1 primes.
    """
    if n < 14:
        return SMALL_LIMIT
    return int(n * math.log(n * math.log(n)))


def base_primes(limit: int) -> np.ndarray:
    """Odd-only sieve returning every prime <= isqrt(limit) + 1 as int64."""
    sqrt_limit = math.isqrt(limit) + 1
    if sqrt_limit < 2:
        return np.array([], dtype=np.int64)
    is_prime = np.zeros(sqrt_limit + 1, dtype=bool)
    is_prime[3::2] = True
    for i in range(3, math.isqrt(sqrt_limit) + 1, 2):
        if is_prime[i]:
            is_prime[i * i :: 2 * i] = False
    return np.concatenate(([2], np.flatnonzero(is_prime))).astype(np.int64)


def chunk_plan(limit: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Chunk]:
    """
    Yields Chunk(index, start, size) descriptors covering [0, limit).
    Chunks are contiguous and disjoint; only the last one may be short.
    """
    if chunk_size <= 0 or chunk_size % 2:
        raise InvalidArgument(f"chunk_size must be a positive even integer, got {chunk_size!r}")
    count = -(-limit // chunk_size)
    for idx in range(count):
        start = idx * chunk_size
        yield Chunk(idx, start, min(chunk_size, limit - start))


def sieve_chunk(idx: int, start: int, size: int, base_primes: np.ndarray) -> np.ndarray:
    """
    Worker: sieve the odd values of [start, start + size) with base_primes.
    Returns the chunk's primes ascending as int64; the chunk holding 2 prepends it.
    `idx` is not used for the arithmetic; it travels with the call so results
    can be reordered after completion.
    """
    end = start + size
    first_odd = start | 1
    odd_count = max(0, (end - first_odd + 1) // 2)
    mask = np.ones(odd_count, dtype=bool)

    for p in base_primes.tolist():
        if p == 2:
            continue
        p2 = p * p
        if p2 >= end:
            break
        # first odd multiple of p inside the chunk, never below p^2
        first = max(p2, ((start + p - 1) // p) * p)
        if (first & 1) == 0:
            first += p
        if first >= end:
            continue
        mask[(first - first_odd) // 2 :: p] = False  # stride p over odds == 2p over values

    if first_odd == 1 and odd_count:
        mask[0] = False

    primes = (first_odd + 2 * np.flatnonzero(mask)).astype(np.int64, copy=False)
    if start <= 2 < end:
        primes = np.concatenate((np.array([2], dtype=np.int64), primes))
    return primes
