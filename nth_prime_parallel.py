#!/usr/bin/env python3
"""
Parallel segmented sieve answering "which prime sits at 0-indexed position n?".

Base primes are computed once in the parent, then every chunk of [0, limit) is
sieved in its own worker process. Each worker owns its mask and result array;
results are reordered by chunk index after the pool joins, so completion order
never affects the answer.
"""
import operator
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import NamedTuple

import numpy as np

from nth_prime_errors import BoundUnderestimate, InvalidArgument
from nth_prime_numpy import (
    DEFAULT_CHUNK_SIZE,
    MAX_LIMIT,
    SMALL_LIMIT,
    base_primes,
    chunk_plan,
    estimate_limit,
    sieve_chunk,
)

DEFAULT_MAX_DOUBLINGS = 4
BACKENDS = ("numpy", "torch")

OK = "ok"
INVALID_ARGUMENT = "invalid_argument"
BOUND_UNDERESTIMATE = "bound_underestimate"


class SearchResult(NamedTuple):
    status: str
    n: int | None
    prime: int | None = None
    limit: int | None = None
    attempts: int = 0
    found: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OK

    def unwrap(self) -> int:
        """Return the prime, or raise the exception matching the failure."""
        if self.status == OK:
            return self.prime
        if self.status == BOUND_UNDERESTIMATE:
            raise BoundUnderestimate(self.n, self.limit, self.found)
        raise InvalidArgument(self.error)


def _as_int(name: str, value) -> int:
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidArgument(f"{name} must be an integer, got {value!r}") from None


def _check_position(n) -> int:
    n = _as_int("n", n)
    if n < 0:
        raise InvalidArgument(f"n must be >= 0, got {n}")
    return n


def _check_config(chunk_size, workers, max_doublings, backend: str):
    chunk_size = _as_int("chunk_size", chunk_size)
    workers = _as_int("workers", workers)
    max_doublings = _as_int("max_doublings", max_doublings)
    if chunk_size <= 0 or chunk_size % 2:
        raise InvalidArgument(f"chunk_size must be a positive even integer, got {chunk_size!r}")
    if workers < 0:
        raise InvalidArgument(f"workers must be >= 0, got {workers!r}")
    if max_doublings < 0:
        raise InvalidArgument(f"max_doublings must be >= 0, got {max_doublings!r}")
    if backend not in BACKENDS:
        raise InvalidArgument(f"backend must be one of {', '.join(BACKENDS)}, got {backend!r}")


def _check_limit(limit) -> int:
    limit = _as_int("limit", limit)
    if limit < 0:
        raise InvalidArgument(f"limit must be >= 0, got {limit}")
    if limit > MAX_LIMIT:
        raise InvalidArgument(f"limit {limit:,} exceeds the supported maximum {MAX_LIMIT:,}")
    return limit


def sieve_chunks(
    limit: int,
    base: np.ndarray,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    workers: int = 0,
    backend: str = "numpy",
    prefer_gpu: bool = True,
) -> list[np.ndarray]:
    """Sieve every chunk of [0, limit); return per-chunk primes in chunk-index order."""
    chunks = list(chunk_plan(limit, chunk_size))

    if backend == "torch":
        # One device, chunks in sequence; device memory is not shared across processes.
        from nth_prime_torch import pick_device, sieve_chunk_torch

        device = pick_device(prefer_gpu)
        return [sieve_chunk_torch(idx, start, size, base, device) for (idx, start, size) in chunks]

    if len(chunks) <= 1 or workers == 1:
        return [sieve_chunk(idx, start, size, base) for (idx, start, size) in chunks]

    by_idx = {}
    with ProcessPoolExecutor(max_workers=workers or None) as ex:
        futures = {
            ex.submit(sieve_chunk, idx, start, size, base): idx
            for (idx, start, size) in chunks
        }
        for fut in as_completed(futures):
            by_idx[futures[fut]] = fut.result()

    # Merge in chunk order; completion order is arbitrary.
    return [by_idx[idx] for (idx, _, _) in chunks]


def select_nth(results: list[np.ndarray], n: int) -> int | None:
    """
    Element n of the concatenation of `results`, or None when it is too short.
    Walks the per-chunk counts instead of building the concatenation.
    """
    for primes in results:
        if n < primes.size:
            return int(primes[n])
        n -= primes.size
    return None


def primes_below(
    limit: int,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    workers: int = 0,
    backend: str = "numpy",
    prefer_gpu: bool = True,
) -> np.ndarray:
    """All primes in [0, limit), ascending, as one int64 array."""
    limit = _check_limit(limit)
    _check_config(chunk_size, workers, 0, backend)
    results = sieve_chunks(limit, base_primes(limit), chunk_size, workers, backend, prefer_gpu)
    if not results:
        return np.array([], dtype=np.int64)
    return np.concatenate(results)


def count_primes_below(
    limit: int,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    workers: int = 0,
    backend: str = "numpy",
    prefer_gpu: bool = True,
) -> int:
    limit = _check_limit(limit)
    _check_config(chunk_size, workers, 0, backend)
    results = sieve_chunks(limit, base_primes(limit), chunk_size, workers, backend, prefer_gpu)
    return sum(int(r.size) for r in results)


def search(
    n: int,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    workers: int = 0,
    max_doublings: int = DEFAULT_MAX_DOUBLINGS,
    limit: int | None = None,
    backend: str = "numpy",
    prefer_gpu: bool = True,
) -> SearchResult:
    """
    Find the prime at 0-indexed position n.

    Never raises for a bad argument or an undershooting bound; the failure is
    reported through SearchResult.status instead, with prime=None.
    When the limit holds too few primes it is doubled and the whole pipeline
    rerun, at most `max_doublings` times.
    """
    try:
        n = _check_position(n)
        _check_config(chunk_size, workers, max_doublings, backend)
        if limit is None:
            limit = estimate_limit(n)
        limit = _check_limit(limit)
    except InvalidArgument as e:
        return SearchResult(INVALID_ARGUMENT, n if isinstance(n, int) else None, error=str(e))

    attempts = 0
    while True:
        attempts += 1
        results = sieve_chunks(limit, base_primes(limit), chunk_size, workers, backend, prefer_gpu)
        prime = select_nth(results, n)
        found = sum(int(r.size) for r in results)
        if prime is not None:
            return SearchResult(OK, n, prime, limit, attempts, found)
        if attempts > max_doublings or limit * 2 > MAX_LIMIT:
            break
        limit = max(limit * 2, SMALL_LIMIT)

    return SearchResult(
        BOUND_UNDERESTIMATE,
        n,
        None,
        limit,
        attempts,
        found,
        error=str(BoundUnderestimate(n, limit, found)),
    )


def nth_prime(n: int, **kwargs) -> int:
    """
    Return the prime at 0-indexed position n (nth_prime(0) == 2).

    Accepts the same keyword arguments as search(). Raises InvalidArgument for
    a negative n or bad configuration, BoundUnderestimate when the retries are
    exhausted.
    """
    return search(n, **kwargs).unwrap()
