"""Public parameters shared between the server and its clients."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from .errors import UnexpectedInputSizeError
from .matrices import (
    SEED_LEN,
    U32_MAX,
    generate_lwe_matrix_from_seed,
    random_ternary_vector,
)


class DatabaseMatrix(Protocol):
    """What parameter generation needs from a database."""

    entries: np.ndarray

    @property
    def matrix_height(self) -> int: ...


def _wrapping_matvec(matrix: np.ndarray, vec: Sequence[int]) -> np.ndarray:
    """Multiply every row of ``matrix`` with ``vec``, modulo 2**32."""
    mat = np.asarray(matrix, dtype=np.uint64)
    v = np.asarray(vec, dtype=np.uint64)
    if mat.ndim != 2 or v.ndim != 1 or mat.shape[1] != v.shape[0]:
        row_len = v.shape[0] if v.ndim == 1 else v.size
        col_len = mat.shape[1] if mat.ndim == 2 else mat.size
        raise UnexpectedInputSizeError(f"row_len: {row_len}, col_len:{col_len},")
    # uint64 arithmetic wraps modulo 2**64, which stays exact modulo 2**32.
    return ((mat @ v) & U32_MAX).astype(np.uint32)


@dataclass(eq=False)
class BaseParams:
    """Parameters a client needs to build queries and decode responses.

    ``rhs`` holds A*DB: one row per database column, ``dim`` values each.
    """

    dim: int
    m: int
    public_seed: bytes
    rhs: np.ndarray
    elem_size: int
    plaintext_bits: int

    def __post_init__(self) -> None:
        self.public_seed = bytes(self.public_seed)
        if len(self.public_seed) != SEED_LEN:
            raise UnexpectedInputSizeError(
                f"public seed must be {SEED_LEN} bytes, got {len(self.public_seed)}"
            )
        rhs = np.asarray(self.rhs, dtype=np.uint32)
        if rhs.size == 0 and rhs.ndim < 2:
            rhs = rhs.reshape(0, self.dim)
        self.rhs = rhs

    @staticmethod
    def generate_params_rhs(db: DatabaseMatrix, public_seed: bytes, dim: int) -> np.ndarray:
        """Compute A*DB, where A is derived from ``public_seed``."""
        height = db.matrix_height
        lhs = generate_lwe_matrix_from_seed(public_seed, dim, height).astype(np.uint64)
        entries = np.asarray(db.entries, dtype=np.uint64)
        if entries.ndim != 2 or entries.shape[1] != height:
            raise UnexpectedInputSizeError(
                f"database columns must have length {height}, got shape {entries.shape}"
            )
        return ((entries @ lhs) & U32_MAX).astype(np.uint32)

    def write_to_file(self, path: str) -> None:
        """Write the seed and the right-hand side as JSON."""
        document = {"lhs_seed": list(self.public_seed), "rhs": self.rhs.tolist()}
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(document, handle)

    def mult_right(self, s: Sequence[int]) -> np.ndarray:
        """Compute s*(A*DB) from the right-hand side of the parameters."""
        return _wrapping_matvec(self.rhs, s)


class CommonParams:
    """The uniform matrix A shared by server parameters and client queries."""

    def __init__(self, matrix) -> None:
        self.matrix = np.asarray(matrix, dtype=np.uint32)

    @classmethod
    def from_params(cls, params: BaseParams) -> "CommonParams":
        """Derive A from the public seed of ``params``."""
        return cls(generate_lwe_matrix_from_seed(params.public_seed, params.dim, params.m))

    def as_matrix(self) -> np.ndarray:
        """Return the matrix, one row per database record."""
        return self.matrix

    def mult_left(self, s: Sequence[int]) -> np.ndarray:
        """Compute A*s + e with a fresh ternary error vector e."""
        s_a = _wrapping_matvec(self.matrix, s).astype(np.uint64)
        e = random_ternary_vector(s_a.shape[0]).astype(np.uint64)
        return ((s_a + e) & U32_MAX).astype(np.uint32)