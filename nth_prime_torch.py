#!/usr/bin/env python3
"""
Chunk sieve on PyTorch tensors (CUDA, Apple MPS, or CPU).

Same odd-only layout as the NumPy worker: mask entry j stands for the odd value
first_odd + 2*j, and composites are cleared with strided stores on the device.
Only the chunk's primes are copied back to the host.
"""
import numpy as np
import torch


def pick_device(prefer_gpu: bool = True) -> torch.device:
    if prefer_gpu and torch.cuda.is_available():
        return torch.device("cuda")
    if prefer_gpu and torch.backends.mps.is_available():
        return torch.device("mps")
    return torch.device("cpu")


def sieve_chunk_torch(idx: int, start: int, size: int, base_primes: np.ndarray, device: torch.device) -> np.ndarray:
    end = start + size
    first_odd = start | 1
    odd_count = max(0, (end - first_odd + 1) // 2)
    if odd_count == 0:
        return np.array([2], dtype=np.int64) if start <= 2 < end else np.array([], dtype=np.int64)

    mask = torch.ones(odd_count, dtype=torch.bool, device=device)

    for p in base_primes.tolist():
        if p == 2:
            continue
        p2 = p * p
        if p2 >= end:
            break
        first = max(p2, ((start + p - 1) // p) * p)
        if (first & 1) == 0:
            first += p
        if first >= end:
            continue
        mask[(first - first_odd) // 2 :: p] = False

    if first_odd == 1:
        mask[0] = False

    idx_t = torch.nonzero(mask, as_tuple=False).squeeze(1)
    primes = (first_odd + 2 * idx_t).to("cpu").numpy().astype(np.int64, copy=False)
    if start <= 2 < end:
        primes = np.concatenate((np.array([2], dtype=np.int64), primes))
    return primes
