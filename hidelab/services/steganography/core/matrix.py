"""
Binary lower triangular matrix (BLTM) generation and GF(2) arithmetic

The matrix has ones on the diagonal, zeros above it and seeded
pseudo-random bits below it, so it is always invertible over GF(2).
Matrix bits come from SHA-256 in counter mode, so a seed maps to the same
matrix on every platform and library version. Nothing is cached.
"""

import hashlib
from typing import Optional

import numpy as np

from .capacity import GROUP_SIZE

# Public and documented, not a secret
DEFAULT_SEED = 0x48494445


def seed_bits(seed: int, count: int) -> np.ndarray:
    """First `count` bits of the SHA-256 stream for a seed, most significant bit first."""
    blocks = []
    counter = 0
    while len(blocks) * 256 < count:
        blocks.append(hashlib.sha256(f"bltm:{seed}:{count}:{counter}".encode("ascii")).digest())
        counter += 1
    return np.unpackbits(np.frombuffer(b"".join(blocks), dtype=np.uint8))[:count]


def generate(seed: Optional[int] = DEFAULT_SEED, k: int = GROUP_SIZE) -> np.ndarray:
    """
    Deterministically build a k x k BLTM from a seed

    Args:
        seed: Non-negative integer seed, None selects DEFAULT_SEED
        k: Matrix order (carrier bits per group)

    Returns:
        A (k, k) uint8 array with entries in {0, 1}
    """
    if seed is None:
        seed = DEFAULT_SEED
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0:
        raise ValueError(f"seed must be a non-negative integer, got {seed!r}")
    if k < 1:
        raise ValueError(f"matrix order must be positive, got {k}")

    matrix = np.tril(seed_bits(int(seed), k * k).reshape(k, k), -1)
    np.fill_diagonal(matrix, 1)
    return matrix


def is_valid_bltm(matrix: np.ndarray) -> bool:
    """Check the unit-diagonal lower-triangular binary structure."""
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        return False
    if not np.isin(matrix, (0, 1)).all():
        return False
    return bool((np.diag(matrix) == 1).all() and not np.triu(matrix, 1).any())


def syndrome(matrix: np.ndarray, groups: np.ndarray) -> np.ndarray:
    """
    Multiply every carrier group by the matrix over GF(2)

    Args:
        matrix: (k, k) BLTM
        groups: (n, k) array of carrier bits

    Returns:
        (n, k) uint8 array of syndrome bits
    """
    product = groups.astype(np.int64) @ matrix.T.astype(np.int64)
    return (product & 1).astype(np.uint8)


def solve_flips(matrix: np.ndarray, delta: np.ndarray) -> np.ndarray:
    """
    Solve matrix @ e = delta over GF(2) for every row of delta

    Forward substitution; the unit diagonal means each bit of e is fixed
    by the bits before it, so the solution is unique.

    Args:
        matrix: (k, k) BLTM
        delta: (n, k) array, syndrome XOR desired message block

    Returns:
        (n, k) uint8 flip vectors
    """
    k = matrix.shape[0]
    flips = np.zeros(delta.shape, dtype=np.uint8)
    for i in range(k):
        column = delta[:, i].astype(np.uint8)
        if i:
            known = flips[:, :i].astype(np.int64) @ matrix[i, :i].astype(np.int64)
            column ^= (known & 1).astype(np.uint8)
        flips[:, i] = column
    return flips
