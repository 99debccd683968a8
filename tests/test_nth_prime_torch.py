import numpy as np
import pytest

torch = pytest.importorskip("torch")

from nth_prime_numpy import base_primes, chunk_plan, sieve_chunk  # noqa: E402
from nth_prime_parallel import nth_prime, primes_below  # noqa: E402
from nth_prime_torch import pick_device, sieve_chunk_torch  # noqa: E402


def test_pick_device_cpu_when_gpu_not_preferred():
    assert pick_device(prefer_gpu=False).type == "cpu"


@pytest.mark.parametrize("limit, chunk_size", [(3, 2), (1000, 64), (10_007, 1000)])
def test_torch_chunks_match_numpy_chunks(limit, chunk_size):
    device = torch.device("cpu")
    base = base_primes(limit)
    for c in chunk_plan(limit, chunk_size):
        expected = sieve_chunk(c.index, c.start, c.size, base)
        got = sieve_chunk_torch(c.index, c.start, c.size, base, device)
        assert got.dtype == np.int64
        assert got.tolist() == expected.tolist()


def test_torch_backend_end_to_end(reference_sieve):
    assert nth_prime(9999, backend="torch", prefer_gpu=False, chunk_size=20_000) == 104729
    got = primes_below(5000, backend="torch", prefer_gpu=False, chunk_size=512)
    assert got.tolist() == reference_sieve(5000)
