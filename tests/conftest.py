import pytest


def _reference_sieve(limit):
    """Plain list sieve: every prime < limit, no segmentation, no odd-only tricks."""
    if limit < 3:
        return []
    is_prime = [True] * limit
    is_prime[0] = is_prime[1] = False
    p = 2
    while p * p < limit:
        if is_prime[p]:
            for i in range(p * p, limit, p):
                is_prime[i] = False
        p += 1
    return [p for p in range(limit) if is_prime[p]]


def _is_prime(n):
    if n < 2:
        return False
    d = 2
    while d * d <= n:
        if n % d == 0:
            return False
        d += 1
    return True


@pytest.fixture
def reference_sieve():
    return _reference_sieve


@pytest.fixture
def is_prime():
    return _is_prime
