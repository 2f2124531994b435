# lwepir

Single-server private information retrieval based on the learning-with-errors
(LWE) problem. A server holds a database of fixed-size elements. A client asks
for one element by its index and gets it back, and the server does not learn
which index was asked for.

All arithmetic is done modulo 2^32. Each database element is split into chunks
of `plaintext_bits` bits, so an element of `elem_size` bits becomes a row of
`ceil(elem_size / plaintext_bits)` values.

## Requirements

Python 3.10 or later and numpy.

## How it fits together

Server side:

- `lwepir.api.Shard` builds the database from base64-encoded elements
  (`Shard.from_base64_strings`) or from a JSON file that holds a list of such
  strings (`Shard.from_json_file`). Only the first `m` elements are used.
  Building a shard also computes the public parameters
  (`lwepir.index.IndexParams`): a random 32-byte public seed and the product
  of the seeded LWE matrix with the database.
- `Shard.respond` answers a `Query` with a serialized `Response` (bytes).
- `Shard.iter_rows` yields every stored element as a base64 string.
- `Shard.write_to_file` saves the database matrix and the public parameters
  (the seed and the right-hand side) as JSON.

Client side:

- `lwepir.params.CommonParams.from_params` rebuilds the LWE matrix from the
  public seed.
- `lwepir.api.generate_index_query_params` draws a fresh ternary secret and
  prepares one set of `QueryParams`. The work can also be split:
  `QueryParams.create_lhs` before the index is known, then
  `QueryParams.compute_rhs` before the answer is decoded.
- `QueryParams.generate_query` turns an index into a `Query`. A set of query
  parameters may be used once only; a second call raises
  `lwepir.errors.QueryParamsReusedError`.
- `lwepir.api.Response.from_bytes` reads the server's answer, and
  `QueryParams.parse_resp_as_row`, `parse_resp_as_bytes` and
  `parse_resp_as_base64` decode it.

Lower-level helpers live in `lwepir.lwe` (modulus and rounding values),
`lwepir.matrices` (seeded matrices, wrapping inner products, ternary sampling)
and `lwepir.bitformat` (conversions between u32 values, bits, bytes and base64,
and SHA-256 into four u64 values).

## Example

```python
import base64
import os

from lwepir.api import Response, Shard, generate_index_query_params
from lwepir.params import CommonParams

m = 2 ** 8            # number of elements
elem_size = 256       # bits per element
plaintext_bits = 10
lwe_dim = 512

elements = [
    base64.b64encode(os.urandom((elem_size + 7) // 8)).decode()
    for _ in range(m)
]

# server
shard = Shard.from_base64_strings(elements, lwe_dim, m, elem_size, plaintext_bits)
params = shard.base_params

# client
common = CommonParams.from_params(params)
query_params = generate_index_query_params(common, params)
query = query_params.generate_query(5)

# server
answer = shard.respond(query)

# client
row = query_params.parse_resp_as_base64(Response.from_bytes(answer))
assert row == elements[5]
```

## Errors

The package's own exceptions derive from `lwepir.errors.PIRError`:

- `UnexpectedInputSizeError` (also a `ValueError`) for vectors, seeds or byte
  strings of the wrong length,
- `QueryParamsReusedError` when query parameters are used a second time,
- `OverflownAddError` (also an `OverflowError`) when adding the query
  indicator would wrap around.

Plain built-in exceptions are raised elsewhere: `IndexError` for an index
outside the database, `ValueError` for a plaintext size outside `[0, 32)` or
for decoding before `compute_rhs` has been called, and the usual errors for
malformed base64, JSON or files.

## Benchmark settings

`lwepir.cli.parse_cli_flags(argv)` reads settings from command-line style
arguments: `-m/--matrix_height` (log2 of the number of elements, default 16),
`-e/--ele_size` (log2 of the element size in bits, default 13),
`-p/--plaintext_bits` (default 10) and `-d/--dim` (LWE dimension, default
2048).

`lwepir.cli.parse_from_env(environ)` reads `PIR_NUMBER_OF_ELEMENTS_EXP` (log2
of the number of elements), `PIR_ELEM_SIZE_BITS` (element size in bits, not a
power), `PIR_PLAINTEXT_BITS`, `PIR_LWE_DIM`, and `BENCH_DB_GEN` and `BENCH_KV`
(each exactly `true` or `false`). It reads `os.environ` when no mapping is
given.

Both return a frozen `CLIFlags` record.

## What it does not do

- There is only lookup by index. Lookup by keyword in a key-value store is not
  provided.
- There is no command to run, no network server and no client transport:
  queries and responses are passed between the two sides by the caller.
- `IndexParams.load` expects a JSON document holding every parameter field
  (`dim`, `m`, `public_seed`, `rhs`, `elem_size`, `plaintext_bits`); it cannot
  read the smaller file that `write_to_file` produces.