#!/usr/bin/env python3
import argparse
import sys
import time

from nth_prime_errors import BoundUnderestimate, InvalidArgument
from nth_prime_numpy import DEFAULT_CHUNK_SIZE
from nth_prime_parallel import BACKENDS, DEFAULT_MAX_DOUBLINGS, primes_below, search


def ordinal(k: int) -> str:
    """1 -> '1st', 12 -> '12th', 10000 -> '10,000th'."""
    if 10 <= k % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(k % 10, "th")
    return f"{k:,}{suffix}"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="nth-prime",
        description="Find the n-th prime (0-indexed) with a parallel segmented, odd-only sieve.",
    )
    ap.add_argument("n", nargs="*", type=int, default=[], help="0-indexed prime positions (0 -> 2).")
    ap.add_argument("--limit", type=int, help="Count primes below LIMIT and print the first/last 100.")
    ap.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE,
                    help=f"Integers per chunk, must be even (default: {DEFAULT_CHUNK_SIZE:,}).")
    ap.add_argument("--workers", type=int, default=0,
                    help="Number of worker processes (default: os.cpu_count()).")
    ap.add_argument("--max-doublings", type=int, default=DEFAULT_MAX_DOUBLINGS,
                    help=f"Times to double an undershooting bound before giving up (default: {DEFAULT_MAX_DOUBLINGS}).")
    ap.add_argument("--backend", choices=BACKENDS, default="numpy",
                    help="Chunk sieve implementation (default: numpy).")
    ap.add_argument("--cpu", action="store_true", help="Force CPU for the torch backend.")
    ap.add_argument("--verbose", "-v", action="store_true", help="Print bound, attempts and timing.")
    return ap


def run_limit(args) -> int:
    t0 = time.perf_counter()
    primes = primes_below(
        args.limit,
        chunk_size=args.chunk_size,
        workers=args.workers,
        backend=args.backend,
        prefer_gpu=not args.cpu,
    )
    elapsed = time.perf_counter() - t0

    print(f"Mode: primes < {args.limit:,} | Workers: {args.workers or 'auto'} | Chunk size: {args.chunk_size:,}")
    print(f"Total count: {primes.size:,}")
    if args.verbose:
        print(f"Elapsed: {elapsed:.3f}s")
    print("\nFirst 100 primes:")
    print(", ".join(map(str, primes[:100].tolist())))
    print("\nLast 100 primes:")
    print(", ".join(map(str, primes[-100:].tolist())))
    return 0


def run_positions(args) -> int:
    print(f"Mode: n-th prime | Workers: {args.workers or 'auto'} | Chunk size: {args.chunk_size:,} | Backend: {args.backend}")
    for n in args.n:
        t0 = time.perf_counter()
        result = search(
            n,
            chunk_size=args.chunk_size,
            workers=args.workers,
            max_doublings=args.max_doublings,
            backend=args.backend,
            prefer_gpu=not args.cpu,
        )
        elapsed = time.perf_counter() - t0
        result.unwrap()
        print(f"The {ordinal(n + 1)} prime (n={n}) is {result.prime:,}")
        if args.verbose:
            print(f"  limit: {result.limit:,} | attempts: {result.attempts} | "
                  f"primes sieved: {result.found:,} | elapsed: {elapsed:.3f}s")
    return 0


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.limit is not None and args.n:
        ap.error("positions n cannot be combined with --limit")
    if args.limit is None and not args.n:
        ap.error("give at least one position n, or --limit")

    try:
        if args.limit is not None:
            return run_limit(args)
        return run_positions(args)
    except InvalidArgument as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except BoundUnderestimate as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
