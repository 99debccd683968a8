#!/usr/bin/env python3
"""Failure types for the n-th prime search."""


class NthPrimeError(Exception):
    """Base class for every failure the search reports."""


class InvalidArgument(NthPrimeError, ValueError):
    """Raised for a negative/non-integer n or an unusable configuration value."""


class BoundUnderestimate(NthPrimeError, LookupError):
    """The sieve domain [0, limit) held fewer than n+1 primes."""

    def __init__(self, n: int, limit: int, found: int):
        super().__init__(
            f"only {found:,} primes below {limit:,}; position {n:,} needs at least {n + 1:,}"
        )
        self.n = n
        self.limit = limit
        self.found = found
