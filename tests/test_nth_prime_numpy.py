import math

import numpy as np
import pytest

from nth_prime_errors import InvalidArgument
from nth_prime_numpy import Chunk, base_primes, chunk_plan, estimate_limit, sieve_chunk


@pytest.mark.parametrize("n", [0, 1, 5, 13])
def test_estimate_limit_small_n_is_constant(n):
    assert estimate_limit(n) == 45


def test_estimate_limit_formula():
    assert estimate_limit(14) == 50
    n = 1_000_000
    assert estimate_limit(n) == int(n * math.log(n * math.log(n)))


def test_estimate_limit_grows_with_n():
    limits = [estimate_limit(n) for n in range(14, 5000)]
    assert limits == sorted(limits)


def test_estimate_limit_handles_hundreds_of_millions():
    # comfortably inside int64
    assert 2_000_000_000 < estimate_limit(100_000_000) < 2 ** 62


def test_base_primes_small():
    assert base_primes(100).tolist() == [2, 3, 5, 7, 11]
    assert base_primes(1).tolist() == [2]
    assert base_primes(0).tolist() == []


def test_base_primes_dtype():
    assert base_primes(1000).dtype == np.int64
    assert base_primes(0).dtype == np.int64


@pytest.mark.parametrize("limit", [2, 9, 10, 49, 50, 1_000_000, 10 ** 9 + 7])
def test_base_primes_match_reference(limit, reference_sieve):
    sqrt_limit = math.isqrt(limit) + 1
    assert base_primes(limit).tolist() == reference_sieve(sqrt_limit + 1)


@pytest.mark.parametrize("limit", [0, 1, 2, 10, 99, 100, 101, 1000, 12_345])
@pytest.mark.parametrize("chunk_size", [2, 10, 64, 100, 100_000_000])
def test_chunk_plan_covers_range_without_gaps_or_overlap(limit, chunk_size):
    chunks = list(chunk_plan(limit, chunk_size))
    assert len(chunks) == math.ceil(limit / chunk_size)
    pos = 0
    for i, c in enumerate(chunks):
        assert c.index == i
        assert c.start == pos
        assert 0 < c.size <= chunk_size
        pos += c.size
    assert pos == limit


def test_chunk_plan_short_last_chunk():
    assert list(chunk_plan(25, 10)) == [Chunk(0, 0, 10), Chunk(1, 10, 10), Chunk(2, 20, 5)]


@pytest.mark.parametrize("chunk_size", [0, -2, 3, 99])
def test_chunk_plan_rejects_bad_chunk_size(chunk_size):
    with pytest.raises(InvalidArgument):
        list(chunk_plan(100, chunk_size))


def test_sieve_chunk_zero_prepends_two_and_skips_one(reference_sieve):
    primes = sieve_chunk(0, 0, 100, base_primes(100))
    assert primes[0] == 2
    assert 1 not in primes.tolist()
    assert primes.tolist() == reference_sieve(100)


def test_sieve_chunk_later_chunk():
    primes = sieve_chunk(1, 100, 100, base_primes(200))
    assert primes.tolist() == [
        101, 103, 107, 109, 113, 127, 131, 137, 139, 149,
        151, 157, 163, 167, 173, 179, 181, 191, 193, 197, 199,
    ]


def test_sieve_chunk_tiny_chunks():
    assert sieve_chunk(0, 0, 2, base_primes(2)).tolist() == []
    assert sieve_chunk(1, 2, 2, base_primes(4)).tolist() == [2, 3]
    assert sieve_chunk(0, 0, 3, base_primes(3)).tolist() == [2]


def test_sieve_chunk_keeps_base_primes_inside_chunk():
    # 3, 5 and 7 are both base primes and members of the chunk
    primes = sieve_chunk(0, 0, 64, base_primes(64))
    assert primes[:4].tolist() == [2, 3, 5, 7]


@pytest.mark.parametrize("limit, chunk_size", [(1000, 10), (1001, 64), (10_007, 1000), (4096, 4096)])
def test_chunks_concatenate_to_reference(limit, chunk_size, reference_sieve):
    base = base_primes(limit)
    parts = [sieve_chunk(c.index, c.start, c.size, base) for c in chunk_plan(limit, chunk_size)]
    assert np.concatenate(parts).tolist() == reference_sieve(limit)
