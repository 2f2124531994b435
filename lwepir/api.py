"""Public entry point for index-based PIR: server shards and client queries."""

from __future__ import annotations

import json
import struct
from dataclasses import dataclass, field
from typing import Iterator, Sequence

import numpy as np

from .bitformat import base64_from_u32_slice, bytes_from_u32_slice
from .errors import OverflownAddError, QueryParamsReusedError, UnexpectedInputSizeError
from .index import IndexDatabase, IndexParams, get_row_width
from .lwe import get_plaintext_size, get_rounding_factor, get_rounding_floor
from .matrices import U32_MAX, random_ternary_vector
from .params import CommonParams

_LEN_PREFIX = struct.Struct("<Q")


@dataclass(eq=False)
class Query:
    """A client query: one u32 value per database record."""

    values: np.ndarray

    def __post_init__(self) -> None:
        self.values = np.asarray(self.values, dtype=np.uint32)


@dataclass(eq=False)
class Response:
    """The answer of a single shard: one u32 value per database column."""

    values: np.ndarray

    def __post_init__(self) -> None:
        self.values = np.asarray(self.values, dtype=np.uint32)

    def to_bytes(self) -> bytes:
        """Serialize as a little-endian u64 length followed by little-endian u32 values."""
        return _LEN_PREFIX.pack(self.values.shape[0]) + self.values.astype("<u4").tobytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> "Response":
        """Parse the format written by :meth:`to_bytes`."""
        data = bytes(data)
        if len(data) < _LEN_PREFIX.size:
            raise UnexpectedInputSizeError(
                f"response needs at least {_LEN_PREFIX.size} bytes, got {len(data)}"
            )
        (count,) = _LEN_PREFIX.unpack_from(data)
        body = data[_LEN_PREFIX.size:]
        if len(body) != 4 * count:
            raise UnexpectedInputSizeError(
                f"response announces {count} values but holds {len(body)} bytes"
            )
        return cls(np.frombuffer(body, dtype="<u4").astype(np.uint32))


@dataclass(eq=False)
class Shard:
    """A preprocessed database, one element per record, that answers queries."""

    db: IndexDatabase
    base_params: IndexParams

    @classmethod
    def from_json_file(
        cls, file_path: str, lwe_dim: int, m: int, elem_size: int, plaintext_bits: int
    ) -> "Shard":
        """Build a shard from a JSON list of base64-encoded elements."""
        with open(file_path, encoding="utf-8") as handle:
            elements = json.load(handle)
        return cls.from_base64_strings(elements, lwe_dim, m, elem_size, plaintext_bits)

    @classmethod
    def from_base64_strings(
        cls,
        base64_strs: Sequence[str],
        lwe_dim: int,
        m: int,
        elem_size: int,
        plaintext_bits: int,
    ) -> "Shard":
        """Build a shard and its public parameters from base64-encoded elements."""
        db = IndexDatabase.from_elements(base64_strs, m, elem_size, plaintext_bits)
        return cls(db, IndexParams.from_database(db, lwe_dim))

    def write_to_file(self, db_path: str, params_path: str) -> None:
        """Write the database and the public parameters as JSON."""
        self.db.write_to_file(db_path)
        self.base_params.write_to_file(params_path)

    def respond(self, q: Query) -> bytes:
        """Answer a query with a serialized :class:`Response`."""
        values = [self.db.vec_mult(q.values, i) for i in range(self.db.row_width)]
        return Response(np.array(values, dtype=np.uint32)).to_bytes()

    def iter_rows(self) -> Iterator[str]:
        """Yield every database element as a base64-encoded string."""
        for i in range(self.db.matrix_height):
            yield self.db.get_db_entry(i)


@dataclass(eq=False)
class QueryParams:
    """Single-use client secrets for building one query and decoding its answer."""

    s: np.ndarray
    lhs: np.ndarray
    rhs: np.ndarray
    elem_size: int
    plaintext_bits: int
    used: bool = field(default=False)

    def __post_init__(self) -> None:
        self.s = np.asarray(self.s, dtype=np.uint32)
        self.lhs = np.asarray(self.lhs, dtype=np.uint32)
        self.rhs = np.asarray(self.rhs, dtype=np.uint32)

    @classmethod
    def create(cls, cp: CommonParams, params: IndexParams) -> "QueryParams":
        """Sample a secret and compute both halves of the query parameters."""
        s = random_ternary_vector(params.dim)
        return cls(
            s=s,
            lhs=cp.mult_left(s),
            rhs=params.mult_right(s),
            elem_size=params.elem_size,
            plaintext_bits=params.plaintext_bits,
        )

    @classmethod
    def create_lhs(cls, cp: CommonParams, params: IndexParams) -> "QueryParams":
        """Sample a secret and compute only the query half; see :meth:`compute_rhs`."""
        s = random_ternary_vector(params.dim)
        return cls(
            s=s,
            lhs=cp.mult_left(s),
            rhs=np.empty(0, dtype=np.uint32),
            elem_size=params.elem_size,
            plaintext_bits=params.plaintext_bits,
        )

    def compute_rhs(self, params: IndexParams) -> None:
        """Compute the decoding half from the stored secret."""
        self.rhs = params.mult_right(self.s)

    def generate_query(self, row_index: int) -> Query:
        """Build the query for record ``row_index``; may be called only once."""
        if self.used:
            raise QueryParamsReusedError()
        self.used = True
        if not 0 <= row_index < self.lhs.shape[0]:
            raise IndexError(f"row index {row_index} out of range 0..{self.lhs.shape[0]}")
        lhs = self.lhs.copy()
        total = int(lhs[row_index]) + get_rounding_factor(self.plaintext_bits)
        if total > U32_MAX:
            raise OverflownAddError()
        lhs[row_index] = total
        return Query(lhs)

    def parse_resp_as_row(self, resp: Response) -> np.ndarray:
        """Decode a response into the plaintext values of the queried record."""
        width = get_row_width(self.elem_size, self.plaintext_bits)
        if self.rhs.shape[0] < width:
            raise ValueError("right-hand side not computed; call compute_rhs first")
        if resp.values.shape[0] < width:
            raise UnexpectedInputSizeError(
                f"response holds {resp.values.shape[0]} values, expected {width}"
            )
        factor = get_rounding_factor(self.plaintext_bits)
        floor = get_rounding_floor(self.plaintext_bits)
        size = get_plaintext_size(self.plaintext_bits)
        left = resp.values[:width].astype(np.int64)
        right = self.rhs[:width].astype(np.int64)
        unscaled = (left - right) & U32_MAX
        rounded = unscaled // factor + (unscaled % factor > floor)
        return (rounded % size).astype(np.uint32)

    def parse_resp_as_bytes(self, resp: Response) -> bytes:
        """Decode a response into the bytes of the queried record."""
        return bytes_from_u32_slice(
            self.parse_resp_as_row(resp), self.plaintext_bits, self.elem_size
        )

    def parse_resp_as_base64(self, resp: Response) -> str:
        """Decode a response into the base64 encoding of the queried record."""
        return base64_from_u32_slice(
            self.parse_resp_as_row(resp), self.plaintext_bits, self.elem_size
        )


def generate_index_query_params(cp: CommonParams, params: IndexParams) -> QueryParams:
    """Return fresh query parameters for an index-based database."""
    return QueryParams.create(cp, params)