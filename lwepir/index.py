"""Index-based database: records addressed by their position."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .bitformat import base64_from_u32_slice, bits_to_u32_le, bytes_to_bits_le
from .errors import UnexpectedInputSizeError
from .matrices import get_matrix_second_at, swap_matrix_fmt, vec_mult_u32_u32
from .params import BaseParams
from .matrices import generate_seed


def get_row_width(element_size: int, plaintext_bits: int) -> int:
    """Return how many plaintext-sized values hold one element."""
    return -(-element_size // plaintext_bits)


def construct_row(element: str, plaintext_bits: int, row_width: int) -> List[int]:
    """Split a base64-encoded element into ``row_width`` plaintext values."""
    bits = bytes_to_bits_le(base64.b64decode(element, validate=True))
    return [
        bits_to_u32_le(bits[i * plaintext_bits:(i + 1) * plaintext_bits])
        for i in range(row_width)
    ]


def construct_rows(
    elements: Sequence[str], m: int, elem_size: int, plaintext_bits: int
) -> np.ndarray:
    """Build the m x row_width matrix from the first ``m`` elements."""
    if len(elements) < m:
        raise UnexpectedInputSizeError(f"expected at least {m} elements, got {len(elements)}")
    row_width = get_row_width(elem_size, plaintext_bits)
    rows = [construct_row(element, plaintext_bits, row_width) for element in elements[:m]]
    return np.array(rows, dtype=np.uint32).reshape(m, row_width)


@dataclass(eq=False)
class IndexDatabase:
    """Database matrix stored column-wise: ``entries[i]`` is column ``i``."""

    entries: np.ndarray
    m: int
    elem_size: int
    plaintext_bits: int

    def __post_init__(self) -> None:
        self.entries = np.asarray(self.entries, dtype=np.uint32)

    @classmethod
    def from_elements(
        cls, elements: Sequence[str], m: int, elem_size: int, plaintext_bits: int
    ) -> "IndexDatabase":
        """Build a database from base64-encoded elements."""
        rows = construct_rows(elements, m, elem_size, plaintext_bits)
        return cls(swap_matrix_fmt(rows), m, elem_size, plaintext_bits)

    @classmethod
    def from_file(
        cls, db_file: str, m: int, elem_size: int, plaintext_bits: int
    ) -> "IndexDatabase":
        """Build a database from a JSON list of base64-encoded elements."""
        with open(db_file, encoding="utf-8") as handle:
            elements = json.load(handle)
        return cls.from_elements(elements, m, elem_size, plaintext_bits)

    @property
    def row_width(self) -> int:
        """Number of plaintext values per element."""
        return get_row_width(self.elem_size, self.plaintext_bits)

    @property
    def matrix_height(self) -> int:
        """Number of elements in the database."""
        return self.m

    def switch_fmt(self) -> None:
        """Switch the stored matrix between column and row format."""
        self.entries = swap_matrix_fmt(self.entries)

    def vec_mult(self, row: Sequence[int], col_idx: int) -> int:
        """Return the inner product of ``row`` with column ``col_idx``."""
        column = self.entries[col_idx]
        if len(row) != column.shape[0]:
            raise UnexpectedInputSizeError(
                f"Incorrect multiplication, row_len: {len(row)}, col_len: {column.shape[0]}"
            )
        return vec_mult_u32_u32(row, column)

    def write_to_file(self, path: str) -> None:
        """Write the stored matrix as JSON."""
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(self.entries.tolist(), handle)

    def get_row(self, i: int) -> np.ndarray:
        """Return a copy of row ``i`` of the stored matrix."""
        return self.entries[i].copy()

    def get_db_entry(self, i: int) -> str:
        """Return element ``i`` as a base64-encoded string."""
        return base64_from_u32_slice(
            get_matrix_second_at(self.entries, i), self.plaintext_bits, self.elem_size
        )


@dataclass(eq=False)
class IndexParams(BaseParams):
    """Client parameters for an :class:`IndexDatabase`."""

    @classmethod
    def from_database(cls, db: IndexDatabase, dim: int) -> "IndexParams":
        """Derive parameters from a database with a fresh public seed."""
        public_seed = generate_seed()
        return cls(
            dim=dim,
            m=db.matrix_height,
            public_seed=public_seed,
            rhs=cls.generate_params_rhs(db, public_seed, dim),
            elem_size=db.elem_size,
            plaintext_bits=db.plaintext_bits,
        )

    @classmethod
    def load(cls, params_path: str) -> "IndexParams":
        """Load parameters from a JSON file holding every field."""
        with open(params_path, encoding="utf-8") as handle:
            document = json.load(handle)
        try:
            return cls(
                dim=document["dim"],
                m=document["m"],
                public_seed=bytes(document["public_seed"]),
                rhs=document["rhs"],
                elem_size=document["elem_size"],
                plaintext_bits=document["plaintext_bits"],
            )
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]!r} in {params_path}") from exc