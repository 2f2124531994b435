"""Matrix and vector helpers over the integers modulo 2**32."""

import secrets
from typing import Sequence

import numpy as np

from .errors import UnexpectedInputSizeError

U32_MAX = 0xFFFFFFFF
SEED_LEN = 32

# Sampling ternary values by rejection: three equal intervals below the bound.
TERNARY_INTERVAL_SIZE = (U32_MAX - 2) // 3
TERNARY_REJECTION_SAMPLING_MAX = TERNARY_INTERVAL_SIZE * 3


def get_matrix_second_at(matrix, secidx: int) -> np.ndarray:
    """Return element ``secidx`` of every row of ``matrix``."""
    return np.array([row[secidx] for row in matrix], dtype=np.uint32)


def swap_matrix_fmt(matrix) -> np.ndarray:
    """Switch a matrix between row and column format (transpose)."""
    arr = np.asarray(matrix, dtype=np.uint32)
    if arr.ndim != 2:
        raise UnexpectedInputSizeError(f"expected a 2-dimensional matrix, got {arr.ndim} dimensions")
    return np.ascontiguousarray(arr.T)


def generate_lwe_matrix_from_seed(seed: bytes, lwe_dim: int, width: int) -> np.ndarray:
    """Derive a uniform ``width`` x ``lwe_dim`` matrix deterministically from a seed."""
    if len(seed) != SEED_LEN:
        raise UnexpectedInputSizeError(f"seed must be {SEED_LEN} bytes, got {len(seed)}")
    sequence = np.random.SeedSequence(int.from_bytes(bytes(seed), "little"))
    rng = np.random.Generator(np.random.PCG64(sequence))
    return rng.integers(0, U32_MAX, size=(width, lwe_dim), dtype=np.uint32, endpoint=True)


def vec_mult_u32_u32(row: Sequence[int], col: Sequence[int]) -> int:
    """Return the inner product of two u32 vectors, modulo 2**32."""
    r = np.asarray(row, dtype=np.uint64)
    c = np.asarray(col, dtype=np.uint64)
    if r.shape[0] != c.shape[0]:
        raise UnexpectedInputSizeError(f"row_len: {r.shape[0]}, col_len:{c.shape[0]},")
    # Sums wrap modulo 2**64, which keeps the result exact modulo 2**32.
    total = (r * c).sum(dtype=np.uint64)
    return int(total) & U32_MAX


def random_ternary() -> int:
    """Sample uniformly from {0, 1, -1}, with -1 represented as 2**32 - 1."""
    val = secrets.randbits(32)
    while val > TERNARY_REJECTION_SAMPLING_MAX:
        val = secrets.randbits(32)
    if val <= TERNARY_INTERVAL_SIZE:
        return 0
    if val <= TERNARY_INTERVAL_SIZE * 2:
        return 1
    return U32_MAX


def random_ternary_vector(width: int) -> np.ndarray:
    """Return a vector of ``width`` independent ternary samples."""
    return np.array([random_ternary() for _ in range(width)], dtype=np.uint32)


def generate_seed() -> bytes:
    """Return a fresh random 32-byte seed."""
    return secrets.token_bytes(SEED_LEN)