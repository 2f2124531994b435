import base64
import hashlib
import os
import struct

import pytest

from lwepir.bitformat import (
    base64_from_u32_slice,
    bits_to_bytes_le,
    bits_to_u32_le,
    bytes_from_u32_slice,
    bytes_to_bits_le,
    sha256_into_u64_sized,
    u32_sized_bytes_from_vec,
    u32_to_bits_le,
)
from lwepir.errors import UnexpectedInputSizeError


def _split(data, plaintext_bits):
    bits = bytes_to_bits_le(data)
    return [
        bits_to_u32_le(bits[i:i + plaintext_bits])
        for i in range(0, len(bits), plaintext_bits)
    ]


def test_u32_to_bits_pinned():
    assert u32_to_bits_le(5, 3) == [True, False, True]


@pytest.mark.parametrize("value", [0, 1, 255, 0x12345678, 0xFFFFFFFF])
def test_u32_bits_round_trip(value):
    bits = u32_to_bits_le(value, 32)
    assert len(bits) == 32
    assert bits_to_u32_le(bits) == value


def test_u32_to_bits_too_long():
    with pytest.raises(UnexpectedInputSizeError):
        u32_to_bits_le(1, 33)


def test_bytes_bits_round_trip():
    data = os.urandom(17)
    bits = bytes_to_bits_le(data)
    assert len(bits) == 17 * 8
    assert bits_to_bytes_le(bits) == data


def test_bits_to_bytes_pads_partial_byte():
    assert bits_to_bytes_le([True]) == b"\x01"


def test_bits_to_u32_too_long():
    with pytest.raises(UnexpectedInputSizeError, match="length: 5"):
        bits_to_u32_le([True] * 33)


def test_u32_sized_bytes():
    assert u32_sized_bytes_from_vec(b"abcd") == b"abcd"
    with pytest.raises(UnexpectedInputSizeError):
        u32_sized_bytes_from_vec(b"abc")


@pytest.mark.parametrize("plaintext_bits", [9, 10, 11])
def test_bytes_from_u32_slice_round_trip(plaintext_bits):
    data = os.urandom(32)
    chunks = _split(data, plaintext_bits)
    assert all(c < (1 << plaintext_bits) for c in chunks)
    assert bytes_from_u32_slice(chunks, plaintext_bits, 256) == data


def test_base64_from_u32_slice_round_trip():
    data = os.urandom(32)
    chunks = _split(data, 11)
    assert base64_from_u32_slice(chunks, 11, 256) == base64.b64encode(data).decode()


def test_exact_multiple_drops_last_entry():
    assert bytes_from_u32_slice([1, 2], 8, 16) == b"\x01"


def test_sha256_split_reassembles_digest():
    key = sha256_into_u64_sized(b"hello")
    assert len(key) == 4
    assert all(0 <= k < 1 << 64 for k in key)
    assert struct.pack("<4Q", *key) == hashlib.sha256(b"hello").digest()


def test_sha256_is_deterministic_and_distinct():
    assert sha256_into_u64_sized(b"a") == sha256_into_u64_sized(b"a")
    assert sha256_into_u64_sized(b"a") != sha256_into_u64_sized(b"b")