import base64
import json

import numpy as np
import pytest

from lwepir.errors import UnexpectedInputSizeError
from lwepir.bitformat import bytes_from_u32_slice
from lwepir.index import (
    IndexDatabase,
    IndexParams,
    construct_row,
    construct_rows,
    get_row_width,
)
from lwepir.params import BaseParams, CommonParams

ELEM_SIZE = 256
PLAINTEXT_BITS = 11
M = 16


def _elements(count=M, byte_len=ELEM_SIZE // 8, seed=3):
    rng = np.random.default_rng(seed)
    return [base64.b64encode(rng.bytes(byte_len)).decode("ascii") for _ in range(count)]


@pytest.fixture
def db():
    return IndexDatabase.from_elements(_elements(), M, ELEM_SIZE, PLAINTEXT_BITS)


@pytest.mark.parametrize("elem_size,bits", [(256, 11), (30, 10), (8192, 10), (7, 9)])
def test_row_width_is_ceiling(elem_size, bits):
    width = get_row_width(elem_size, bits)
    assert width * bits >= elem_size
    assert (width - 1) * bits < elem_size


def test_construct_row_worked_example():
    assert construct_row("AQI=", 8, 2) == [1, 2]


def test_construct_row_round_trips_through_bytes():
    element = _elements(1)[0]
    width = get_row_width(ELEM_SIZE, PLAINTEXT_BITS)
    row = construct_row(element, PLAINTEXT_BITS, width)
    assert len(row) == width
    assert all(0 <= v < 1 << PLAINTEXT_BITS for v in row)
    assert bytes_from_u32_slice(row, PLAINTEXT_BITS, ELEM_SIZE) == base64.b64decode(element)


def test_construct_row_rejects_invalid_base64():
    with pytest.raises(ValueError):
        construct_row("not base64!", 8, 2)


def test_construct_rows_needs_enough_elements():
    with pytest.raises(UnexpectedInputSizeError):
        construct_rows(_elements(3), 4, ELEM_SIZE, PLAINTEXT_BITS)


def test_construct_rows_shape():
    rows = construct_rows(_elements(5), 4, ELEM_SIZE, PLAINTEXT_BITS)
    assert rows.shape == (4, get_row_width(ELEM_SIZE, PLAINTEXT_BITS))


def test_entries_are_stored_column_wise(db):
    assert db.entries.shape == (db.row_width, M)
    assert db.matrix_height == M


def test_get_db_entry_returns_original_elements(db):
    elements = _elements()
    assert [db.get_db_entry(i) for i in range(M)] == elements


def test_switch_fmt_transposes_and_back(db):
    original = db.entries.copy()
    db.switch_fmt()
    assert db.entries.shape == (M, db.row_width)
    assert np.array_equal(db.entries, original.T)
    db.switch_fmt()
    assert np.array_equal(db.entries, original)


def test_vec_mult_with_unit_vector_selects_entry(db):
    selector = [0] * M
    selector[5] = 1
    for col in range(db.row_width):
        assert db.vec_mult(selector, col) == int(db.entries[col][5])


def test_vec_mult_rejects_wrong_length(db):
    with pytest.raises(UnexpectedInputSizeError):
        db.vec_mult([1] * (M - 1), 0)


def test_get_row_returns_copy(db):
    row = db.get_row(0)
    expected = db.entries[0].tolist()
    row[0] = row[0] + 1
    assert db.entries[0].tolist() == expected


def test_write_to_file_writes_entries(db, tmp_path):
    path = tmp_path / "db.json"
    db.write_to_file(str(path))
    assert json.loads(path.read_text()) == db.entries.tolist()


def test_from_file_matches_from_elements(db, tmp_path):
    path = tmp_path / "elements.json"
    path.write_text(json.dumps(_elements()))
    loaded = IndexDatabase.from_file(str(path), M, ELEM_SIZE, PLAINTEXT_BITS)
    assert np.array_equal(loaded.entries, db.entries)


def test_params_from_database(db):
    params = IndexParams.from_database(db, 8)
    assert len(params.public_seed) == 32
    assert params.m == M
    assert params.dim == 8
    assert params.elem_size == ELEM_SIZE
    assert params.plaintext_bits == PLAINTEXT_BITS
    assert params.rhs.shape == (db.row_width, 8)
    expected = BaseParams.generate_params_rhs(db, params.public_seed, 8)
    assert np.array_equal(params.rhs, expected)


def test_params_work_with_common_params(db):
    params = IndexParams.from_database(db, 8)
    cp = CommonParams.from_params(params)
    assert cp.as_matrix().shape == (M, 8)


def test_params_load_round_trip(db, tmp_path):
    params = IndexParams.from_database(db, 8)
    path = tmp_path / "params.json"
    path.write_text(
        json.dumps(
            {
                "dim": params.dim,
                "m": params.m,
                "public_seed": list(params.public_seed),
                "rhs": params.rhs.tolist(),
                "elem_size": params.elem_size,
                "plaintext_bits": params.plaintext_bits,
            }
        )
    )
    loaded = IndexParams.load(str(path))
    assert loaded.public_seed == params.public_seed
    assert np.array_equal(loaded.rhs, params.rhs)
    assert (loaded.dim, loaded.m, loaded.elem_size, loaded.plaintext_bits) == (
        params.dim,
        params.m,
        params.elem_size,
        params.plaintext_bits,
    )


def test_params_load_missing_field(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"dim": 1}))
    with pytest.raises(ValueError):
        IndexParams.load(str(path))